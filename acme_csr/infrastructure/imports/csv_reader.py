"""Reads uploaded CSV files into normalized row dicts"""

import csv
import io
from typing import Dict, Iterator, List, Tuple

from ...domain.exceptions import ImportException

Row = Tuple[int, Dict[str, str]]


def _decode(content: bytes) -> str:
    for encoding in ("utf-8-sig", "cp1252"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ImportException.invalid_file("File is not valid UTF-8 or Windows-1252 text")


def _normalize_header(header: str) -> str:
    return (header or "").strip().lower().replace(" ", "_")


class CsvImportReader:
    """Rows are numbered from 2 so they match the line numbers a spreadsheet shows"""

    def __init__(self, content: bytes, required_columns=()):
        if not content or not content.strip():
            raise ImportException.invalid_file("File is empty")
        self._text = _decode(content)
        reader = csv.reader(io.StringIO(self._text))
        try:
            header = next(reader)
        except StopIteration:
            raise ImportException.invalid_file("File has no header row")
        self.columns = [_normalize_header(column) for column in header]
        missing = [column for column in required_columns if column not in self.columns]
        if missing:
            raise ImportException.invalid_file(f"Missing required columns: {', '.join(missing)}")

    def rows(self) -> Iterator[Row]:
        reader = csv.reader(io.StringIO(self._text))
        next(reader)
        for offset, values in enumerate(reader, start=2):
            if not any(value.strip() for value in values):
                continue
            row = {
                column: values[index].strip() if index < len(values) else ""
                for index, column in enumerate(self.columns)
                if column
            }
            yield offset, row

    def count(self) -> int:
        return sum(1 for _ in self.rows())

    def chunks(self, size: int) -> Iterator[List[Row]]:
        chunk: List[Row] = []
        for row in self.rows():
            chunk.append(row)
            if len(chunk) >= size:
                yield chunk
                chunk = []
        if chunk:
            yield chunk

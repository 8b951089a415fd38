"""File writers for exports"""

import csv
import io
from typing import Any, Iterable, List, Sequence

from openpyxl import Workbook

from ...domain.enums import ExportFormat
from ...domain.exceptions import ExportException


class CsvExportWriter:

    def __init__(self):
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer)

    def write_header(self, headers: Sequence[str]) -> None:
        self._writer.writerow(headers)

    def write_rows(self, rows: Iterable[List[Any]]) -> None:
        self._writer.writerows(rows)

    def close(self) -> bytes:
        # BOM so spreadsheet apps detect UTF-8
        return self._buffer.getvalue().encode("utf-8-sig")


class ExcelExportWriter:
    """Streams rows into a write-only openpyxl workbook"""

    def __init__(self, sheet_title: str = "Export"):
        self._workbook = Workbook(write_only=True)
        self._sheet = self._workbook.create_sheet(title=sheet_title[:31])

    def write_header(self, headers: Sequence[str]) -> None:
        self._sheet.append(list(headers))

    def write_rows(self, rows: Iterable[List[Any]]) -> None:
        for row in rows:
            self._sheet.append(row)

    def close(self) -> bytes:
        output = io.BytesIO()
        self._workbook.save(output)
        return output.getvalue()


def writer_for(export_format: ExportFormat, sheet_title: str = "Export"):
    if export_format == ExportFormat.CSV:
        return CsvExportWriter()
    if export_format == ExportFormat.EXCEL:
        return ExcelExportWriter(sheet_title)
    raise ExportException.unsupported_format(export_format)

"""CSV import parsing, row validation and export writers"""

import io
from datetime import datetime
from decimal import Decimal

import pytest
from openpyxl import load_workbook
from pydantic import ValidationError

from acme_csr.domain.enums import ExportFormat, ImportType, UserRole
from acme_csr.domain.exceptions import ExportException, ImportException
from acme_csr.infrastructure.exports.writers import CsvExportWriter, ExcelExportWriter, writer_for
from acme_csr.infrastructure.imports.csv_reader import CsvImportReader
from acme_csr.infrastructure.imports.row_schemas import CampaignImportRow, UserImportRow, describe_errors, schema_for

pytestmark = pytest.mark.unit


class TestCsvImportReader:

    def test_headers_are_normalized(self):
        reader = CsvImportReader(b"Email, Full Name\nana@example.com,Ana\n")

        assert reader.columns == ["email", "full_name"]
        assert list(reader.rows()) == [(2, {"email": "ana@example.com", "full_name": "Ana"})]

    def test_blank_lines_keep_spreadsheet_numbering(self):
        reader = CsvImportReader(b"email,name\na@example.com,A\n\n,\nb@example.com,B\n")

        assert [number for number, _ in reader.rows()] == [2, 5]
        assert reader.count() == 2

    def test_short_rows_are_padded(self):
        reader = CsvImportReader(b"email,name,department\nana@example.com,Ana\n")

        (_, row), = reader.rows()
        assert row["department"] == ""

    def test_byte_order_mark_and_windows_encoding(self):
        assert CsvImportReader("\ufeffemail\nx@example.com\n".encode("utf-8")).columns == ["email"]
        assert list(CsvImportReader("name\nJosé\n".encode("cp1252")).rows())[0][1]["name"] == "José"

    def test_chunks(self):
        content = b"email\n" + b"".join(f"user{i}@example.com\n".encode() for i in range(5))

        sizes = [len(chunk) for chunk in CsvImportReader(content).chunks(2)]

        assert sizes == [2, 2, 1]

    @pytest.mark.parametrize("content,reason", [
        (b"", "empty"),
        (b"   \n", "empty"),
        (b"name\nAna\n", "email"),
    ])
    def test_invalid_files(self, content, reason):
        with pytest.raises(ImportException) as exc_info:
            CsvImportReader(content, required_columns=("email", "name"))

        assert reason in exc_info.value.message
        assert exc_info.value.status_code == 422


class TestRowSchemas:

    def test_user_row_defaults_to_employee(self):
        row = UserImportRow.model_validate({"email": "ana@example.com", "name": " Ana ", "role": "", "department": ""})

        assert row.role == UserRole.EMPLOYEE
        assert row.name == "Ana"
        assert row.department is None

    def test_admins_cannot_be_imported(self):
        with pytest.raises(ValidationError) as exc_info:
            UserImportRow.model_validate({"email": "ana@example.com", "name": "Ana", "role": "Admin"})

        assert "Administrators cannot be imported" in describe_errors(exc_info.value)

    def test_campaign_row(self):
        row = CampaignImportRow.model_validate({
            "title": "Food bank",
            "goal_amount": "1500",
            "currency": "usd",
            "start_date": "2026-01-01T00:00:00",
            "end_date": "2026-03-01T00:00:00",
            "category": "",
        })

        assert row.goal_amount == Decimal("1500")
        assert row.currency == "USD"
        assert row.start_date == datetime(2026, 1, 1)
        assert row.category is None

    def test_campaign_dates_must_be_ordered(self):
        with pytest.raises(ValidationError):
            CampaignImportRow.model_validate({
                "title": "Food bank", "goal_amount": "10", "start_date": "2026-03-01T00:00:00", "end_date": "2026-01-01T00:00:00",
            })

    def test_unsupported_type(self):
        with pytest.raises(ImportException):
            schema_for(ImportType.DONATIONS)


class TestExportWriters:

    def test_csv_has_bom_and_rows(self):
        writer = CsvExportWriter()
        writer.write_header(["ID", "Name"])
        writer.write_rows([[1, "Ana"], [2, "Li, Wei"]])

        content = writer.close()

        assert content.startswith(b"\xef\xbb\xbf")
        assert content.decode("utf-8-sig").splitlines() == ["ID,Name", "1,Ana", '2,"Li, Wei"']

    def test_excel_workbook(self):
        writer = ExcelExportWriter("Donations")
        writer.write_header(["ID", "Amount"])
        writer.write_rows([[1, "10.00"]])

        sheet = load_workbook(io.BytesIO(writer.close())).active

        assert sheet.title == "Donations"
        assert [[cell.value for cell in row] for row in sheet.iter_rows()] == [["ID", "Amount"], [1, "10.00"]]

    def test_pdf_has_no_writer(self):
        assert isinstance(writer_for(ExportFormat.CSV), CsvExportWriter)
        with pytest.raises(ExportException):
            writer_for(ExportFormat.PDF)

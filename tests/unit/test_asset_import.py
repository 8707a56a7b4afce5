"""Unit tests for bulk import parsing and row validation."""

import io

import pytest
from openpyxl import Workbook

from stratify.core.errors import ValidationError
from stratify.services.asset_import import (
    TEMPLATE_HEADERS,
    parse_csv,
    parse_spreadsheet,
    split_tags,
    upload_template_csv,
    validate_rows,
)

HEADER = ",".join(TEMPLATE_HEADERS)


def _csv(*rows: str) -> bytes:
    return "\n".join([HEADER, *rows]).encode()


VALID_ROWS = [
    'Customer Portal,application,Web Application,Portal,IT,active,high,"web,portal"',
    "Orders DB,database,RDBMS (MySQL/PostgreSQL),Orders,DBA,active,high,db",
    "Edge Router,infrastructure,Network Device,Core router,NetOps,active,medium,network",
    "Event Bus,middleware,Message Queue / Broker,Kafka,Platform,planned,low,kafka",
    "Payroll,cloud-service,SaaS,Payroll SaaS,HR,active,medium,hr",
]


class TestValidateRows:
    def test_one_invalid_type_fails_the_batch(self):
        rows = list(VALID_ROWS)
        rows[3] = "Event Bus,invalid-type,Message Queue / Broker,Kafka,Platform,planned,low,kafka"

        result = validate_rows(parse_csv(_csv(*rows)))

        assert result.is_valid is False
        assert result.total_rows == 5
        assert result.valid_rows == 4
        assert len(result.errors) >= 1
        assert result.errors[0].row == 5
        assert result.errors[0].field == "type"
        assert len(result.drafts) == 4

    def test_all_valid_rows_produce_drafts(self):
        result = validate_rows(parse_csv(_csv(*VALID_ROWS)))

        assert result.is_valid is True
        assert result.valid_rows == 5
        assert result.drafts[0].tags == ["web", "portal"]
        assert result.drafts[3].status.value == "planned"

    def test_category_from_another_type_is_an_error(self):
        result = validate_rows(
            parse_csv(_csv("CRM,application,RDBMS (MySQL/PostgreSQL),CRM,Sales,active,high,crm"))
        )

        assert not result.is_valid
        issue = result.errors[0]
        assert issue.field == "category"
        assert "database" in issue.message

    def test_missing_tags_only_warns(self):
        result = validate_rows(parse_csv(_csv("Orders DB,database,NoSQL Database,Orders,DBA,active,high,")))

        assert result.is_valid
        assert result.errors == []
        assert [w.field for w in result.warnings] == ["tags"]

    def test_missing_required_field_is_reported_per_field(self):
        result = validate_rows(parse_csv(_csv("Orders DB,database,NoSQL Database,,DBA,,high,db")))

        fields = sorted(issue.field for issue in result.errors)
        assert fields == ["description", "status"]
        assert str(result.errors[0]).startswith("Row 2:")

    def test_invalid_status_and_criticality(self):
        result = validate_rows(
            parse_csv(_csv("Orders DB,database,NoSQL Database,Orders,DBA,retired,urgent,db"))
        )

        assert sorted(issue.field for issue in result.errors) == ["criticality", "status"]

    def test_missing_column_is_reported_against_header(self):
        content = b"Asset Name,Asset Type,Category\nOrders DB,database,NoSQL Database\n"
        result = validate_rows(parse_csv(content))

        header_issues = [issue for issue in result.errors if issue.row == 1]
        assert {issue.field for issue in header_issues} == {
            "description",
            "owner",
            "status",
            "criticality",
        }

    def test_header_only_file_has_no_data(self):
        result = validate_rows(parse_csv(HEADER.encode()))

        assert not result.is_valid
        assert result.total_rows == 0
        assert "no data rows" in result.errors[0].message


class TestParsing:
    def test_blank_rows_are_skipped_but_numbering_kept(self):
        sheet = parse_csv(_csv(VALID_ROWS[0], ",,,,,,,", VALID_ROWS[1]))
        assert [number for number, _ in sheet.rows] == [2, 4]

    def test_csv_with_byte_order_mark(self):
        sheet = parse_csv("\ufeff".encode() + _csv(VALID_ROWS[0]))
        assert sheet.fields[0] == "name"

    def test_xlsx_first_sheet_is_read(self):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(TEMPLATE_HEADERS)
        sheet.append(["Orders DB", "database", "NoSQL Database", "Orders", "DBA", "active", "high", "db"])
        buffer = io.BytesIO()
        workbook.save(buffer)

        result = validate_rows(parse_spreadsheet("assets.xlsx", buffer.getvalue()))

        assert result.is_valid
        assert result.drafts[0].name == "Orders DB"

    def test_unreadable_workbook(self):
        with pytest.raises(ValidationError, match="Excel"):
            parse_spreadsheet("assets.xlsx", b"not a workbook")

    def test_unsupported_extension(self):
        with pytest.raises(ValidationError, match="Unsupported file type"):
            parse_spreadsheet("assets.json", b"[]")

    def test_split_tags(self):
        assert split_tags(" web , ,portal ") == ["web", "portal"]
        assert split_tags(None) == []

    def test_template_validates_cleanly(self):
        result = validate_rows(parse_csv(upload_template_csv().encode()))
        assert result.is_valid
        assert result.total_rows == 1

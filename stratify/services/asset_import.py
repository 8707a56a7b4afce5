"""Spreadsheet parsing and validation for bulk asset import."""

from __future__ import annotations

import csv
import io
import zipfile
from dataclasses import dataclass, field

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from stratify.core.asset_catalog import (
    ASSET_TYPE_VALUES,
    categories_for,
    category_owner,
    parse_asset_type,
)
from stratify.core.errors import ValidationError
from stratify.models.asset import AssetDraft
from stratify.models.enums import AssetStatus, Criticality
from stratify.models.upload import ImportValidationResult, RowIssue

TEMPLATE_HEADERS = [
    "Asset Name",
    "Asset Type",
    "Category",
    "Description",
    "Owner",
    "Status",
    "Criticality",
    "Tags",
]

# Canonical field -> display header
FIELD_LABELS = {
    "name": "Asset Name",
    "type": "Asset Type",
    "category": "Category",
    "description": "Description",
    "owner": "Owner",
    "status": "Status",
    "criticality": "Criticality",
    "tags": "Tags",
}

REQUIRED_FIELDS = ("name", "type", "category", "description", "owner", "status", "criticality")

_HEADER_ALIASES = {
    "assetname": "name",
    "name": "name",
    "assettype": "type",
    "type": "type",
    "category": "category",
    "description": "description",
    "owner": "owner",
    "status": "status",
    "criticality": "criticality",
    "tags": "tags",
}

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")

_STATUS_VALUES = tuple(s.value for s in AssetStatus)
_CRITICALITY_VALUES = tuple(c.value for c in Criticality)


@dataclass
class ParsedSheet:
    """Header fields and data rows keyed by canonical field name.

    ``rows`` pairs each row with its 1-based sheet row number (header is 1).
    """

    fields: list[str]
    rows: list[tuple[int, dict[str, str]]] = field(default_factory=list)


def _canonical_header(header: str) -> str | None:
    key = "".join(ch for ch in header.lower() if ch.isalnum())
    return _HEADER_ALIASES.get(key)


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _build_sheet(records: list[list[str]]) -> ParsedSheet:
    if not records:
        return ParsedSheet(fields=[])
    header = [_canonical_header(cell) if cell else None for cell in records[0]]
    sheet = ParsedSheet(fields=[name for name in header if name])
    for offset, record in enumerate(records[1:], start=2):
        if not any(cell for cell in record):
            continue
        values: dict[str, str] = {}
        for index, name in enumerate(header):
            if name and index < len(record):
                values[name] = record[index]
        sheet.rows.append((offset, values))
    return sheet


def parse_csv(content: bytes) -> ParsedSheet:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")
    reader = csv.reader(io.StringIO(text))
    return _build_sheet([[cell.strip() for cell in record] for record in reader])


def parse_xlsx(content: bytes) -> ParsedSheet:
    """Read the first worksheet of an .xlsx workbook."""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
        raise ValidationError("file", None, "Could not read the Excel workbook") from exc
    try:
        worksheet = workbook.worksheets[0]
        records = [
            [_cell_text(value) for value in row]
            for row in worksheet.iter_rows(values_only=True)
        ]
    finally:
        workbook.close()
    return _build_sheet(records)


def parse_spreadsheet(filename: str, content: bytes) -> ParsedSheet:
    """Parse an uploaded .csv or .xlsx file.

    Raises:
        ValidationError: For other file types or unreadable workbooks
    """
    lowered = (filename or "").lower()
    if lowered.endswith(".csv"):
        return parse_csv(content)
    if lowered.endswith(".xlsx"):
        return parse_xlsx(content)
    raise ValidationError(
        "file",
        filename,
        "Unsupported file type. Upload a .csv or .xlsx file.",
    )


def split_tags(raw: str | None) -> list[str]:
    return [tag.strip() for tag in (raw or "").split(",") if tag.strip()]


def _validate_row(row_number: int, values: dict[str, str]) -> tuple[list[RowIssue], list[RowIssue]]:
    errors: list[RowIssue] = []
    warnings: list[RowIssue] = []

    for name in REQUIRED_FIELDS:
        if not values.get(name, "").strip():
            errors.append(
                RowIssue(
                    row=row_number,
                    field=name,
                    value=None,
                    message=f"Missing required field: {FIELD_LABELS[name]}",
                )
            )

    raw_type = values.get("type", "").strip()
    asset_type = parse_asset_type(raw_type.lower()) if raw_type else None
    if raw_type and asset_type is None:
        errors.append(
            RowIssue(
                row=row_number,
                field="type",
                value=raw_type,
                message=f"Invalid asset type '{raw_type}'. Expected one of: {', '.join(ASSET_TYPE_VALUES)}",
            )
        )

    category = values.get("category", "").strip()
    if asset_type is not None and category and category not in categories_for(asset_type):
        owner = category_owner(category)
        hint = f" (belongs to '{owner.value}')" if owner else ""
        errors.append(
            RowIssue(
                row=row_number,
                field="category",
                value=category,
                message=f"Invalid category '{category}' for type '{asset_type.value}'{hint}",
            )
        )

    status = values.get("status", "").strip()
    if status and status.lower() not in _STATUS_VALUES:
        errors.append(
            RowIssue(
                row=row_number,
                field="status",
                value=status,
                message=f"Invalid status '{status}'. Expected one of: {', '.join(_STATUS_VALUES)}",
            )
        )

    criticality = values.get("criticality", "").strip()
    if criticality and criticality.lower() not in _CRITICALITY_VALUES:
        errors.append(
            RowIssue(
                row=row_number,
                field="criticality",
                value=criticality,
                message=(
                    f"Invalid criticality '{criticality}'. "
                    f"Expected one of: {', '.join(_CRITICALITY_VALUES)}"
                ),
            )
        )

    if not split_tags(values.get("tags")):
        warnings.append(
            RowIssue(row=row_number, field="tags", value=None, message="No tags provided")
        )

    return errors, warnings


def _draft_from_row(values: dict[str, str]) -> AssetDraft:
    return AssetDraft(
        name=values["name"].strip(),
        type=values["type"].strip().lower(),
        category=values["category"].strip(),
        description=values.get("description", "").strip(),
        owner=values.get("owner", "").strip(),
        status=values["status"].strip().lower(),
        criticality=values["criticality"].strip().lower(),
        tags=split_tags(values.get("tags")),
    )


def validate_rows(sheet: ParsedSheet) -> ImportValidationResult:
    """Check every row independently.

    The batch is valid only when no row produced an error; warnings never
    block it. Drafts are built for the rows without errors.
    """
    errors: list[RowIssue] = []
    warnings: list[RowIssue] = []
    drafts: list[AssetDraft] = []

    missing_columns = [name for name in REQUIRED_FIELDS if name not in sheet.fields]
    if sheet.fields and missing_columns:
        for name in missing_columns:
            errors.append(
                RowIssue(
                    row=1,
                    field=name,
                    value=None,
                    message=f"Missing required column: {FIELD_LABELS[name]}",
                )
            )

    for row_number, values in sheet.rows:
        row_errors, row_warnings = _validate_row(row_number, values)
        errors.extend(row_errors)
        warnings.extend(row_warnings)
        if not row_errors:
            drafts.append(_draft_from_row(values))

    if not sheet.rows:
        errors.append(RowIssue(row=1, field="file", value=None, message="The file contains no data rows"))

    return ImportValidationResult(
        is_valid=not errors,
        total_rows=len(sheet.rows),
        valid_rows=len(drafts),
        errors=errors,
        warnings=warnings,
        drafts=drafts,
    )


def upload_template_csv() -> str:
    """Downloadable template with the expected header and one example row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TEMPLATE_HEADERS)
    writer.writerow(
        [
            "Customer Portal",
            "application",
            "Web Application",
            "Main customer-facing portal",
            "IT Department",
            "active",
            "high",
            "web,customer,portal",
        ]
    )
    return buffer.getvalue()

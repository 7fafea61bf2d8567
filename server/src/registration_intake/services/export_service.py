"""Export service - regenerates the CSV and XLSX artifacts from the store"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from registration_intake.models.registration import RegistrationRecord, utc_timestamp
from registration_intake.services.registration_store import RegistrationStore

logger = logging.getLogger(__name__)

CSV_FILENAME = "registrations.csv"
XLSX_FILENAME = "registrations.xlsx"
WORKSHEET_TITLE = "Registrations"

CSV_HEADER = "ID,Username,Email,Team,Registration Date"
CSV_FIELDS = ("username", "email", "team")


class ExportError(RuntimeError):
    """An export artifact could not be written"""


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _sheet_text(value: str) -> str:
    # Control characters are not allowed in worksheet XML
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def _sheet_cell(value: Any) -> Any:
    if value is None or isinstance(value, (int, float, bool)):
        return value
    if not isinstance(value, str):
        value = json.dumps(value, ensure_ascii=False)
    return _sheet_text(value)


def render_csv(records: List[RegistrationRecord]) -> str:
    """
    Render the fixed-column CSV export.

    Values are comma-joined without quoting, so a value containing a comma
    or newline shifts the columns of its row. Fields outside the fixed
    columns are left out and missing ones render empty.
    """
    rows = []
    for record in records:
        cells = [str(record.id)]
        cells.extend(_csv_cell(record.fields.get(name)) for name in CSV_FIELDS)
        cells.append(record.registration_date)
        rows.append(",".join(cells))
    return CSV_HEADER + "\n" + "\n".join(rows)


def build_table(records: List[RegistrationRecord]) -> tuple[List[str], List[List[Any]]]:
    """Project records onto columns taken from every key seen, in first-seen order"""
    documents: List[Dict[str, Any]] = [record.to_document() for record in records]

    columns: Dict[str, None] = {}
    for document in documents:
        for key in document:
            columns.setdefault(key, None)
    header = [_sheet_text(key) for key in columns]

    rows = [[_sheet_cell(document.get(key)) for key in columns] for document in documents]
    return header, rows


class ExportMaterializer:
    """Writes both export artifacts next to the collection file"""

    def __init__(self, store: RegistrationStore, export_dir: Path | str | None = None):
        self.store = store
        self.export_dir = Path(export_dir) if export_dir else store.data_dir
        self.csv_file = self.export_dir / CSV_FILENAME
        self.xlsx_file = self.export_dir / XLSX_FILENAME

    def write_csv(self, records: List[RegistrationRecord]) -> None:
        try:
            self.csv_file.write_text(
                render_csv(records), encoding="utf-8", newline=""
            )
        except OSError as e:
            raise ExportError(f"Cannot write {self.csv_file}: {e}") from e

    def write_workbook(self, records: List[RegistrationRecord]) -> None:
        header, rows = build_table(records)

        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = WORKSHEET_TITLE
        for row in ([header] if header else []) + rows:
            worksheet.append(row)
            # Keep submitted text as text, even when it looks like a formula
            for cell in worksheet[worksheet.max_row]:
                if isinstance(cell.value, str):
                    cell.data_type = "s"

        try:
            workbook.save(self.xlsx_file)
        except OSError as e:
            raise ExportError(f"Cannot write {self.xlsx_file}: {e}") from e

    def refresh(self) -> bool:
        """
        Regenerate both artifacts from the current collection.

        Never raises: failures are logged and superseded by the next refresh.

        Returns:
            bool: True if both artifacts were written, False otherwise
        """
        try:
            records = self.store.load()
            self.export_dir.mkdir(parents=True, exist_ok=True)
            self.write_csv(records)
            self.write_workbook(records)
        except Exception as e:
            logger.error(f"Error updating export files: {type(e).__name__}: {e}")
            return False

        logger.info(f"Files updated at: {utc_timestamp()}")
        return True

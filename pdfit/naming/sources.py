"""Department lookup tables for name resolution.

Loaders never raise. A missing or unreadable source yields an empty table,
which makes the resolver fall back to pass-through names.
"""

import sqlite3
from contextlib import closing
from pathlib import Path

from openpyxl import load_workbook

from pdfit.config.constants import DEFAULT_DEPARTMENT_QUERY
from pdfit.naming.resolver import Department
from pdfit.utils.logging import get_logger

log = get_logger(__name__)


def load_departments_from_excel(path: Path | str) -> dict[int, Department]:
    """Load departments from the first sheet of an Excel workbook.

    Expected columns after a header row: section number, department number,
    department abbreviation, section abbreviation. Rows that cannot be read
    are skipped.
    """
    path = Path(path)
    if not path.exists():
        log.warning("Department workbook not found, names will not be mapped", path=str(path))
        return {}

    departments: dict[int, Department] = {}
    try:
        wb = load_workbook(path, read_only=True, data_only=True)
        try:
            ws = wb.worksheets[0] if wb.worksheets else None
            if ws is None:
                return {}
            for row in ws.iter_rows(min_row=2, values_only=True):
                if not row or len(row) < 4:
                    continue
                section, _dept_number, dept_abbrev, section_abbrev = row[:4]
                try:
                    section_id = int(section)
                except (TypeError, ValueError):
                    continue
                departments[section_id] = Department(
                    section_id=section_id,
                    department="" if dept_abbrev is None else str(dept_abbrev).strip(),
                    section="" if section_abbrev is None else str(section_abbrev).strip(),
                )
        finally:
            wb.close()
    except Exception as e:
        log.warning("Failed to read department workbook", path=str(path), error=str(e))
        return {}

    log.info("Loaded department mapping", source="excel", count=len(departments))
    return departments


def load_departments_from_database(
    path: Path | str, query: str = DEFAULT_DEPARTMENT_QUERY
) -> dict[int, Department]:
    """Load departments from a SQLite database.

    ``query`` must return (section id, department name, section name) rows.
    """
    path = Path(path)
    if not path.exists():
        log.warning("Department database not found, names will not be mapped", path=str(path))
        return {}

    departments: dict[int, Department] = {}
    try:
        with closing(sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)) as conn:
            for section, department, section_name in conn.execute(query):
                try:
                    section_id = int(section)
                except (TypeError, ValueError):
                    continue
                departments[section_id] = Department(
                    section_id=section_id,
                    department=department or "",
                    section=section_name or "",
                )
    except (sqlite3.Error, ValueError) as e:
        log.warning("Failed to query department database", path=str(path), error=str(e))
        return {}

    log.info("Loaded department mapping", source="database", count=len(departments))
    return departments

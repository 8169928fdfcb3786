"""Target file name resolution.

A resolver maps a source document name to the name of the PDF it becomes.
Resolvers never raise: when no mapping applies, the source stem with the
``.pdf`` extension is used.
"""

import re
from dataclasses import dataclass
from pathlib import PurePath

from pdfit.config.constants import TARGET_EXTENSION
from pdfit.utils.logging import get_logger

log = get_logger(__name__)

# Characters not allowed in file names on Windows, plus control characters
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

# {section}-{document}, both integers
_MAPPED_NAME = re.compile(r"^\s*(\+?\d+)\s*-\s*(\+?\d+)\s*$")


@dataclass(frozen=True)
class Department:
    """Lookup record for one department section."""

    section_id: int
    department: str
    section: str


def sanitize_filename_part(value: str) -> str:
    """Replace characters that are invalid in file names with ``_``."""
    if not value:
        return value
    return _INVALID_FILENAME_CHARS.sub("_", value)


def default_target_name(source_file_name: str) -> str:
    """Source stem with the PDF extension."""
    return PurePath(source_file_name).stem + TARGET_EXTENSION


class NameResolver:
    """Pass-through resolver: ``report.docx`` becomes ``report.pdf``."""

    def resolve(self, source_file_name: str | None) -> str:
        if not source_file_name or not source_file_name.strip():
            return ""
        try:
            return self._resolve(source_file_name)
        except Exception as e:
            log.debug("Name lookup failed, using source name", file=source_file_name, error=str(e))
            return default_target_name(source_file_name)

    def _resolve(self, source_file_name: str) -> str:
        return default_target_name(source_file_name)


class DepartmentNameResolver(NameResolver):
    """Maps ``{section}-{doc}`` names to ``{dept}_{section}_{id}_{doc}.pdf``.

    Sections missing from the lookup table and names of any other shape fall
    back to the pass-through name.
    """

    def __init__(self, departments: dict[int, Department]) -> None:
        self.departments = departments

    def _resolve(self, source_file_name: str) -> str:
        match = _MAPPED_NAME.match(PurePath(source_file_name).stem)
        if not match:
            return default_target_name(source_file_name)

        section_id, doc_number = int(match.group(1)), int(match.group(2))
        department = self.departments.get(section_id)
        if department is None:
            return default_target_name(source_file_name)

        return (
            f"{sanitize_filename_part(department.department)}_"
            f"{sanitize_filename_part(department.section)}_"
            f"{section_id}_{doc_number}{TARGET_EXTENSION}"
        )

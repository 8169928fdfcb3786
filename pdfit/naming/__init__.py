"""Target file name resolution for PdfIt."""

from pdfit.config.settings import NamingConfig
from pdfit.naming.resolver import (
    Department,
    DepartmentNameResolver,
    NameResolver,
    default_target_name,
    sanitize_filename_part,
)
from pdfit.naming.sources import load_departments_from_database, load_departments_from_excel
from pdfit.utils.logging import get_logger

log = get_logger(__name__)


def create_resolver(config: NamingConfig) -> NameResolver:
    """Create the resolver selected by ``config.source``.

    A mapping source without a configured path falls back to pass-through.
    """
    if config.source == "excel":
        if not config.excel_path:
            log.warning("naming.excel_path not set, using source names")
            return NameResolver()
        return DepartmentNameResolver(load_departments_from_excel(config.excel_path))

    if config.source == "database":
        if not config.database_path:
            log.warning("naming.database_path not set, using source names")
            return NameResolver()
        return DepartmentNameResolver(
            load_departments_from_database(config.database_path, config.query)
        )

    return NameResolver()


__all__ = [
    "Department",
    "DepartmentNameResolver",
    "NameResolver",
    "create_resolver",
    "default_target_name",
    "load_departments_from_database",
    "load_departments_from_excel",
    "sanitize_filename_part",
]

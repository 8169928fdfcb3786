"""Exclusive-session backend: Microsoft Word automation (Windows only).

Every conversion creates its own Word.Application instance through COM,
exports one document and tears the instance down again. A Word instance must
never be shared between threads, and too many live instances make Word
unstable, hence the low parallelism ceiling.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol

from pdfit.config.constants import DEFAULT_SESSION_CEILING
from pdfit.converters.base import ConversionBackend, discard_partial, partial_target_path
from pdfit.exceptions import BackendNotFoundError, ConversionError
from pdfit.utils.logging import get_logger

log = get_logger(__name__)

# Word object model constants
WD_ALERTS_NONE = 0
WD_DO_NOT_SAVE_CHANGES = 0
WD_EXPORT_FORMAT_PDF = 17
WD_EXPORT_OPTIMIZE_FOR_PRINT = 0
WD_EXPORT_CREATE_WORD_BOOKMARKS = 2


class OfficeSession(Protocol):
    """A live, single-threaded office automation session."""

    def open_document(self, path: Path) -> Any: ...

    def export_pdf(self, document: Any, target_path: Path) -> None: ...

    def close_document(self, document: Any) -> None: ...

    def quit(self) -> None: ...

    def release(self) -> None: ...


class WordSession:
    """A private Word.Application instance bound to the creating thread."""

    def __init__(self) -> None:
        import pythoncom
        import win32com.client

        # COM must be initialized on every worker thread that uses it
        pythoncom.CoInitialize()
        try:
            app = win32com.client.DispatchEx("Word.Application")
            app.Visible = False
            app.DisplayAlerts = WD_ALERTS_NONE
            app.ScreenUpdating = False
        except Exception:
            pythoncom.CoUninitialize()
            raise
        self._app = app

    def open_document(self, path: Path) -> Any:
        return self._app.Documents.Open(
            str(path.absolute()),
            ConfirmConversions=False,
            ReadOnly=True,
            AddToRecentFiles=False,
        )

    def export_pdf(self, document: Any, target_path: Path) -> None:
        document.ExportAsFixedFormat(
            OutputFileName=str(target_path.absolute()),
            ExportFormat=WD_EXPORT_FORMAT_PDF,
            OpenAfterExport=False,
            OptimizeFor=WD_EXPORT_OPTIMIZE_FOR_PRINT,
            IncludeDocProps=True,
            KeepIRM=True,
            CreateBookmarks=WD_EXPORT_CREATE_WORD_BOOKMARKS,
            DocStructureTags=True,
            BitmapMissingFonts=True,
            UseISO19005_1=False,
        )

    def close_document(self, document: Any) -> None:
        document.Close(SaveChanges=WD_DO_NOT_SAVE_CHANGES)

    def quit(self) -> None:
        if self._app is not None:
            app, self._app = self._app, None
            app.Quit(SaveChanges=WD_DO_NOT_SAVE_CHANGES)

    def release(self) -> None:
        import pythoncom

        self._app = None
        pythoncom.CoUninitialize()


def _require_word_automation() -> None:
    if sys.platform != "win32":
        raise BackendNotFoundError("word", "Word automation only works on Windows")
    try:
        import pythoncom  # noqa: F401
        import win32com.client  # noqa: F401
    except ImportError as e:
        raise BackendNotFoundError("word", "pywin32 is required for Word automation") from e


def _guarded(step: str, func: Callable[..., Any], *args: Any) -> None:
    """Run one release step; failures are logged and never propagate."""
    try:
        func(*args)
    except Exception as e:
        log.debug("Error during session cleanup (non-fatal)", step=step, error=str(e))


class WordSessionBackend(ConversionBackend):
    """Convert documents to PDF through one exclusive Word session per job."""

    name = "word"
    kind = "exclusive_session"

    def __init__(
        self,
        session_factory: Callable[[], OfficeSession] | None = None,
        session_ceiling: int = DEFAULT_SESSION_CEILING,
    ) -> None:
        """Initialize the Word backend.

        Args:
            session_factory: Creates a fresh session per conversion. Defaults
                             to WordSession, which needs Windows and pywin32.
            session_ceiling: Maximum number of sessions alive at once

        Raises:
            BackendNotFoundError: Word automation is unavailable
        """
        if session_factory is None:
            _require_word_automation()
            session_factory = WordSession
        self._session_factory = session_factory
        self.parallelism_ceiling = session_ceiling

    def convert(self, source_path: Path, target_path: Path, timeout: float | None = None) -> Path:
        """Export a document to PDF.

        Word writes into a partial file next to the target, which replaces
        the target only after a complete export. A failed export never leaves
        a fresh file at the target path.

        ``timeout`` is not enforced: a blocked automation call cannot be
        interrupted from Python.
        """
        target_path.parent.mkdir(parents=True, exist_ok=True)
        partial_path = partial_target_path(target_path)

        try:
            self._export(source_path, partial_path)

            if not partial_path.exists():
                raise ConversionError(source_path, "Word did not produce output file")

            try:
                os.replace(partial_path, target_path)
            except OSError as e:
                raise ConversionError(
                    source_path, f"Failed to move output into place: {e}", cause=e
                ) from e
        finally:
            discard_partial(partial_path)

        return target_path

    def _export(self, source_path: Path, output_path: Path) -> None:
        try:
            with self._session() as session, self._document(session, source_path) as document:
                session.export_pdf(document, output_path)
        except ConversionError:
            raise
        except Exception as e:
            raise ConversionError(source_path, f"Office automation error: {e}", cause=e) from e

    @contextmanager
    def _session(self) -> Iterator[OfficeSession]:
        session = self._session_factory()
        try:
            yield session
        finally:
            _guarded("quit", session.quit)
            _guarded("release", session.release)

    @contextmanager
    def _document(self, session: OfficeSession, source_path: Path) -> Iterator[Any]:
        document = session.open_document(source_path)
        try:
            yield document
        finally:
            _guarded("close document", session.close_document, document)


def check_word_available() -> bool:
    """Check whether Word automation can be started on this machine."""
    try:
        _require_word_automation()
    except BackendNotFoundError:
        return False

    import pythoncom
    import win32com.client

    pythoncom.CoInitialize()
    try:
        word = win32com.client.DispatchEx("Word.Application")
        word.Quit()
        return True
    except Exception:
        return False
    finally:
        pythoncom.CoUninitialize()

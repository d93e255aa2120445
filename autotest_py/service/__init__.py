"""Autotest session tracking and polling."""

from .events import Emitter
from .registry import SessionRegistry, normalize_key
from .service import AUTOTEST_FILENAME, AUTOTEST_RESULTS_FILENAME, AutotestService
from .status import program_status, test_status
from .storage import FileStorage, LocalFileStorage

__all__ = [
    "AUTOTEST_FILENAME",
    "AUTOTEST_RESULTS_FILENAME",
    "AutotestService",
    "Emitter",
    "FileStorage",
    "LocalFileStorage",
    "SessionRegistry",
    "normalize_key",
    "program_status",
    "test_status",
]

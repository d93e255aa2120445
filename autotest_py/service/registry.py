"""In-memory registry of testing sessions keyed by directory."""

import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..client.models import Program
from ..errors import SessionActiveError


def normalize_key(directory: Union[str, Path]) -> str:
    """Return the registry key for *directory* ("a/b/" and "a/b" are the same)."""
    return os.path.normpath(str(directory))


class SessionRegistry:
    """
    Maps a tracked directory to its current Program.
    A directory is being tested while its program carries a result.
    """

    def __init__(self):
        self._programs: Dict[str, Program] = {}

    def get(self, directory) -> Optional[Program]:
        return self._programs.get(normalize_key(directory))

    def put(self, directory, program: Program) -> None:
        """Insert or replace the program for *directory*."""
        key = normalize_key(directory)
        current = self._programs.get(key)
        if current is not None and current is not program and current.result is not None:
            raise SessionActiveError(f"Directory {key} is still being tested")
        self._programs[key] = program

    def is_being_tested(self, directory) -> bool:
        program = self.get(directory)
        return program is not None and program.result is not None

    def clear_result(self, directory) -> None:
        program = self.get(directory)
        if program is not None:
            program.result = None

    def keys(self) -> List[str]:
        return list(self._programs)

    def __contains__(self, directory) -> bool:
        return normalize_key(directory) in self._programs

    def __len__(self) -> int:
        return len(self._programs)

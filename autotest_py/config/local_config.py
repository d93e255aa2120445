"""Local configuration management (.autotest_py.local)."""

import json
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

FILENAME = ".autotest_py.local"


@dataclass
class LocalConfig:
    """
    Workspace configuration. The directory holding .autotest_py.local is
    the workspace root; its settings override the global ones.
    """

    server_url: Optional[str] = None
    language: Optional[str] = None
    path: Optional[Path] = field(default=None, compare=False)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Optional["LocalConfig"]:
        """
        Load local config from file.
        If path is not specified, searches upward from current directory.
        """
        if path is None:
            path = cls.find_config()

        if path is None or not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
                return cls(
                    server_url=data.get("server_url"),
                    language=data.get("language"),
                    path=path,
                )
        except (json.JSONDecodeError, IOError, TypeError, AttributeError):
            return None

    def save(self, path: Optional[Path] = None) -> None:
        """Save local config to file."""
        if path is None:
            path = self.path or Path.cwd() / FILENAME

        data = {}
        if self.server_url:
            data["server_url"] = self.server_url
        if self.language:
            data["language"] = self.language

        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        self.path = path

    def workspace_root(self) -> Path:
        """Directory the config lives in."""
        return (self.path or Path.cwd() / FILENAME).resolve().parent

    @staticmethod
    def find_config(start: Optional[Path] = None) -> Optional[Path]:
        """
        Search for .autotest_py.local starting from *start* (default: current
        directory), walking up to root.
        """
        current = (start or Path.cwd()).resolve()

        while True:
            config_path = current / FILENAME
            if config_path.exists():
                return config_path

            if current == current.parent:
                return None

            current = current.parent

"""Global configuration management (~/.autotest_py.global)."""

import json
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

DEFAULT_PATH = Path.home() / ".autotest_py.global"


@dataclass
class GlobalConfig:
    """
    Global configuration storing the autotester server and credentials.
    Stored at ~/.autotest_py.global
    """

    server_url: str = "http://localhost"
    user: str = ""
    password: str = ""
    poll_interval: float = 0.5
    timeout: float = 30.0
    language: str = "bs"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GlobalConfig":
        """Load global config from file."""
        if path is None:
            path = DEFAULT_PATH

        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
                defaults = cls()
                return cls(
                    server_url=data.get("server_url", defaults.server_url),
                    user=data.get("user", ""),
                    password=data.get("password", ""),
                    poll_interval=float(data.get("poll_interval", defaults.poll_interval)),
                    timeout=float(data.get("timeout", defaults.timeout)),
                    language=data.get("language", defaults.language),
                )
        except (json.JSONDecodeError, IOError, TypeError, ValueError, AttributeError):
            return cls()

    def save(self, path: Optional[Path] = None) -> None:
        """Save global config to file."""
        if path is None:
            path = DEFAULT_PATH

        data = {
            "server_url": self.server_url,
            "user": self.user,
            "password": self.password,
            "poll_interval": self.poll_interval,
            "timeout": self.timeout,
            "language": self.language,
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def has_credentials(self) -> bool:
        """Check if credentials are stored."""
        return bool(self.user and self.password)

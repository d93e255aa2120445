"""File storage used to read task definitions and persist results."""

import asyncio
from pathlib import Path
from typing import Optional, Protocol, Union

from ..client.models import FileStat

PathLike = Union[str, Path]


class FileStorage(Protocol):
    """Capability for reading, writing and inspecting files."""

    async def read_text(self, path: PathLike) -> str: ...

    async def write_text(self, path: PathLike, content: str) -> None: ...

    async def delete(self, path: PathLike) -> None: ...

    async def stat(self, path: PathLike) -> Optional[FileStat]: ...


class LocalFileStorage:
    """FileStorage backed by the local filesystem."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def read_text(self, path: PathLike) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding=self.encoding)

    async def write_text(self, path: PathLike, content: str) -> None:
        await asyncio.to_thread(Path(path).write_text, content, encoding=self.encoding)

    async def delete(self, path: PathLike) -> None:
        """Delete a file; raises FileNotFoundError if it does not exist."""
        await asyncio.to_thread(Path(path).unlink)

    async def stat(self, path: PathLike) -> Optional[FileStat]:
        return await asyncio.to_thread(self._stat, Path(path))

    @staticmethod
    def _stat(path: Path) -> Optional[FileStat]:
        if not path.exists():
            return None
        if not path.is_dir():
            return FileStat(path=path, is_directory=False)

        children = [
            FileStat(path=child, is_directory=child.is_dir())
            for child in sorted(path.iterdir())
        ]
        return FileStat(path=path, is_directory=True, children=children)

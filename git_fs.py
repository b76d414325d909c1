import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    async def readdir(self, path: str) -> list[str]: ...

    async def readdir_deep(self, path: str) -> list[str]: ...

    async def read(self, path: str) -> Optional[str]: ...

    async def write(self, path: str, content: str) -> None: ...


def join(*parts: Optional[str]) -> str:
    return '/'.join(part.rstrip('/') for part in parts if part)


class LocalFileSystem:
    """Async access to the local disk; blocking calls run in worker threads.

    Directory listings are sorted so that repeated runs over the same
    repository enumerate entries in the same order.
    """

    async def readdir(self, path: str) -> list[str]:
        return sorted(await asyncio.to_thread(os.listdir, path))

    async def readdir_deep(self, path: str) -> list[str]:
        return await asyncio.to_thread(_walk_files, Path(path))

    async def read(self, path: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(Path(path).read_text, encoding='utf-8')
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            return None

    async def write(self, path: str, content: str) -> None:
        logger.debug(f"Writing {path}")
        await asyncio.to_thread(_write_text, Path(path), content)


def _walk_files(root: Path) -> list[str]:
    if not root.is_dir():
        return []
    return sorted(
        file.relative_to(root).as_posix()
        for file in root.rglob('*')
        if file.is_file()
    )


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(content)

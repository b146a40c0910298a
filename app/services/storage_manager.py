import asyncio
import os
from pathlib import Path
from typing import AsyncIterator, Dict, Optional, Tuple
import aiofiles
import aiofiles.os
from starlette.requests import ClientDisconnect
from app.errors import IOFailure
from app.services.artifact_path import build_artifact_path, resolve_in_repository
from logger_config import get_logger

logger = get_logger()

# Path canonicalization stats and reads symlinks, so keep it off the event loop
build_artifact_path_async = aiofiles.os.wrap(build_artifact_path)
resolve_in_repository_async = aiofiles.os.wrap(resolve_in_repository)


class StorageManager:
    def __init__(self, repo_dir: Path):
        self.repo_dir = Path(repo_dir)
        # Per-path write locks, with a count of holders and waiters
        self._path_locks: Dict[Path, Tuple[asyncio.Lock, int]] = {}

    async def initialize(self):
        """Create the repository root if it does not exist yet."""
        await aiofiles.os.makedirs(self.repo_dir, exist_ok=True)
        logger.info(f"Serving directory {self.repo_dir.resolve()}")

    async def artifact_path(self, request_path: str) -> Path:
        """Validate a PUT request path and map it onto the repository."""
        return await build_artifact_path_async(request_path, self.repo_dir)

    def _acquire_entry(self, path: Path) -> asyncio.Lock:
        lock, users = self._path_locks.get(path, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._path_locks[path] = (lock, users + 1)
        return lock

    def _release_entry(self, path: Path):
        lock, users = self._path_locks[path]
        if users <= 1:
            del self._path_locks[path]
        else:
            self._path_locks[path] = (lock, users - 1)

    async def store_artifact(self, file_path: Path, chunks: AsyncIterator[bytes]) -> int:
        """Stream chunks into file_path, replacing any previous content.

        Writers to the same path are serialized. Returns the number of bytes written.
        """
        lock = self._acquire_entry(file_path)
        try:
            async with lock:
                return await self._write_chunks(file_path, chunks)
        finally:
            self._release_entry(file_path)

    async def _write_chunks(self, file_path: Path, chunks: AsyncIterator[bytes]) -> int:
        operation = "create directories"
        try:
            await aiofiles.os.makedirs(file_path.parent, exist_ok=True)

            operation = "open"
            async with aiofiles.open(file_path, 'wb') as f:
                operation = "write"
                size = 0
                async for chunk in chunks:
                    if chunk:
                        await f.write(chunk)
                        size += len(chunk)
        except OSError as e:
            logger.error(f"Upload of {file_path} failed during {operation}: {e}", exc_info=True)
            raise IOFailure(operation, file_path) from e
        except ClientDisconnect as e:
            logger.warning(f"Client disconnected while uploading {file_path}")
            raise IOFailure("receive", file_path) from e

        logger.debug(f"Wrote {size} bytes to {file_path}")
        return size

    async def open_artifact(self, request_path: str) -> Optional[Tuple[Path, os.stat_result]]:
        """Find an existing file for a GET request path.

        Returns the file path and its stat result, or None if there is no such file.
        """
        path = await resolve_in_repository_async(request_path.lstrip("/"), self.repo_dir)
        if path is None or not await aiofiles.os.path.isfile(path):
            return None
        return path, await aiofiles.os.stat(path)

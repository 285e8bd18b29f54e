from __future__ import annotations

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile

from pdf_rule_checker.checker.errors import UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class StoredUpload:
    """An uploaded file spooled to the upload directory.

    The file is removed exactly once: either when its bytes are read or
    when ``discard`` is called, whichever comes first.
    """

    def __init__(self, path: Path, size: int) -> None:
        self.path = path
        self.size = size
        self._removed = False

    @property
    def removed(self) -> bool:
        return self._removed

    def read_head(self, length: int) -> bytes:
        with self.path.open("rb") as handle:
            return handle.read(length)

    def read_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        finally:
            self.discard()

    def discard(self) -> None:
        if self._removed:
            return
        self._removed = True
        try:
            self.path.unlink()
        except FileNotFoundError:
            logger.warning("Upload already removed path=%s", self.path)


class UploadStore:
    def __init__(self, directory: Path, max_bytes: int) -> None:
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def save(self, upload: UploadFile) -> StoredUpload:
        self.ensure_directory()
        fd, name = tempfile.mkstemp(prefix="upload-", suffix=".pdf", dir=self.directory)
        path = Path(name)
        size = 0
        try:
            with os.fdopen(fd, "wb") as handle:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise UploadTooLargeError("File too large")
                    handle.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        logger.debug("Stored upload path=%s bytes=%s", path, size)
        return StoredUpload(path, size)

    @asynccontextmanager
    async def stored(self, upload: UploadFile) -> AsyncIterator[StoredUpload]:
        stored = await self.save(upload)
        try:
            yield stored
        finally:
            stored.discard()

import asyncio
import io

import pytest
from fastapi import UploadFile

from pdf_rule_checker.checker.errors import UploadTooLargeError
from pdf_rule_checker.storage.uploads import UploadStore


def _leftovers(upload_dir):
    if not upload_dir.exists():
        return []
    return sorted(upload_dir.iterdir())


def _upload(data: bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename="doc.pdf")


def test_save_writes_file_into_upload_directory(upload_dir):
    store = UploadStore(upload_dir, max_bytes=1024)

    stored = asyncio.run(store.save(_upload(b"%PDF-1.4 data")))

    assert stored.path.parent == upload_dir
    assert stored.size == 13
    assert stored.read_head(5) == b"%PDF-"
    assert _leftovers(upload_dir) == [stored.path]


def test_read_bytes_removes_file(upload_dir):
    store = UploadStore(upload_dir, max_bytes=1024)
    stored = asyncio.run(store.save(_upload(b"%PDF-1.4 data")))

    assert stored.read_bytes() == b"%PDF-1.4 data"
    assert stored.removed
    assert _leftovers(upload_dir) == []

    stored.discard()
    assert _leftovers(upload_dir) == []


def test_stored_context_discards_on_error(upload_dir):
    store = UploadStore(upload_dir, max_bytes=1024)

    async def run():
        async with store.stored(_upload(b"%PDF-1.4 data")):
            raise RuntimeError("validation failed")

    with pytest.raises(RuntimeError):
        asyncio.run(run())

    assert _leftovers(upload_dir) == []


def test_stored_context_discards_on_success(upload_dir):
    store = UploadStore(upload_dir, max_bytes=1024)

    async def run():
        async with store.stored(_upload(b"%PDF-1.4 data")) as stored:
            return stored

    stored = asyncio.run(run())

    assert stored.removed
    assert _leftovers(upload_dir) == []


def test_save_rejects_oversized_upload(upload_dir):
    store = UploadStore(upload_dir, max_bytes=10)

    with pytest.raises(UploadTooLargeError):
        asyncio.run(store.save(_upload(b"x" * 11)))

    assert _leftovers(upload_dir) == []

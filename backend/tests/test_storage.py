"""Tests for the local blob store."""
import pytest

from app.integrations.storage import LocalBlobStore, StorageError


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(root=str(tmp_path), url_prefix="/media/")


@pytest.mark.asyncio
async def test_upload_writes_file(store, tmp_path):
    url = await store.upload("capas/r1/cover.jpg", b"data")

    assert url == "/media/capas/r1/cover.jpg"
    assert (tmp_path / "capas" / "r1" / "cover.jpg").read_bytes() == b"data"


@pytest.mark.asyncio
async def test_delete_removes_file(store, tmp_path):
    await store.upload("audios/r1/t1/a.wav", b"RIFF")
    await store.delete("audios/r1/t1/a.wav")

    assert not (tmp_path / "audios" / "r1" / "t1" / "a.wav").exists()


@pytest.mark.asyncio
async def test_delete_missing_is_not_an_error(store):
    await store.delete("capas/none/cover.jpg")


@pytest.mark.asyncio
async def test_path_outside_root_refused(store):
    with pytest.raises(StorageError):
        await store.upload("../escape.txt", b"x")

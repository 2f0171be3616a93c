"""Pytest fixtures for Blackstar tests."""
import asyncio
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.main import app
from app.database import Base, get_db
from app.dependencies import get_blob_store
from app.domain import (
    FileAttachment,
    ImageAttachment,
    ReleaseDraft,
    ReleaseType,
    TrackDraft,
)
from app.integrations.storage import StorageError
from app.services.releases import ReleaseService

# In-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeBlobStore:
    """In-memory blob store that records calls.

    Paths listed in ``fail_delete`` or ``fail_upload`` raise StorageError.
    ``fail_all_deletes`` makes every delete raise.
    """

    def __init__(self):
        self.blobs = {}
        self.deleted = []
        self.fail_delete = set()
        self.fail_upload = set()
        self.fail_all_deletes = False

    async def upload(self, path, data):
        if path in self.fail_upload:
            raise StorageError(f"upload refused: {path}")
        self.blobs[path] = data
        return f"/media/{path}"

    async def delete(self, path):
        self.deleted.append(path)
        if self.fail_all_deletes or path in self.fail_delete:
            raise StorageError(f"delete refused: {path}")
        self.blobs.pop(path, None)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(db):
    """Alias for db fixture (used by some tests)."""
    return db


@pytest.fixture
def blobs():
    """Fake blob store shared by the service and the API client."""
    return FakeBlobStore()


@pytest.fixture
def service(db, blobs):
    """Release service on the test database and fake blob store."""
    return ReleaseService(db, blobs)


@pytest.fixture(scope="function")
def client(db, blobs):
    """Create a test client with the test database and blob store."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blobs
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def release_date():
    """A release date comfortably past the minimum lead time."""
    return date.today() + timedelta(days=30)


@pytest.fixture
def cover():
    """Cover attachment declaring the required dimensions."""
    return ImageAttachment(name="cover.jpg", data=b"jpeg-bytes", width=3000, height=3000)


@pytest.fixture
def single_draft(release_date, cover):
    """Factory for a valid single draft. Keyword arguments override fields."""
    def _create(**overrides):
        fields = dict(
            type=ReleaseType.SINGLE,
            title="noite de verão",
            main_artist=["MC KEVIN"],
            genre="Funk",
            release_date=release_date,
            has_cover=True,
            cover=cover,
            tracks=[TrackDraft(
                feat=["dj guuga"],
                composer=["kevin da silva"],
                audio=FileAttachment(name="noite.wav", data=b"RIFF-single"),
            )],
        )
        fields.update(overrides)
        return ReleaseDraft(**fields)

    return _create


@pytest.fixture
def album_draft(release_date, cover):
    """Factory for a valid two-track album draft."""
    def _create(**overrides):
        fields = dict(
            type=ReleaseType.ALBUM,
            title="the end of the road",
            main_artist=["banda do mar"],
            genre="Pop",
            release_date=release_date,
            has_cover=True,
            cover=cover,
            tracks=[
                TrackDraft(
                    title="first song",
                    artist=["banda do mar"],
                    composer=["ana maria"],
                    has_isrc=True,
                    isrc="brabc2400001",
                    audio=FileAttachment(name="01.wav", data=b"RIFF-one"),
                ),
                TrackDraft(
                    title="second song",
                    artist=["banda do mar", "convidado"],
                    composer=["ana maria"],
                    audio=FileAttachment(name="02.wav", data=b"RIFF-two"),
                    lyrics="la la la",
                ),
            ],
        )
        fields.update(overrides)
        return ReleaseDraft(**fields)

    return _create


@pytest.fixture
def submitted_single(service, single_draft):
    """A single already submitted through the service (sync tests only)."""
    return asyncio.run(service.submit(single_draft()))


@pytest.fixture
def submitted_album(service, album_draft):
    """An album already submitted through the service (sync tests only)."""
    return asyncio.run(service.submit(album_draft()))

"""Release model."""
from sqlalchemy import Column, String, Boolean, Date, DateTime, Text, JSON
from app.database import Base


class ReleaseRecord(Base):
    """Persisted release document.

    Nested structures (checklist, tracks, downloads) are stored as JSON in
    the same shape as the legacy documents, sentinels included.
    """

    __tablename__ = "releases"

    id = Column(String(36), primary_key=True)
    type = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    main_artist = Column(JSON, nullable=False)  # ["Artist", ...]
    genre = Column(String(100), nullable=False, index=True)
    release_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    has_cover = Column(Boolean, default=False)
    cover_file_name = Column(String(500))
    cover_url = Column(String(1000), default="")
    status = Column(String(20), nullable=False, index=True)
    checklist = Column(JSON, nullable=False)  # {filesVerified, metadataVerified, ...}
    tracks = Column(JSON, nullable=False)  # [{id, title, artist, composer, ...}]
    purged = Column(Boolean, default=False)
    admin_notes = Column(Text, default="")
    downloads = Column(JSON)  # [{date, user, fileType, fileName}]

    def __repr__(self):
        return f"<Release {self.title} ({self.status})>"

"""Artist registry model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class Artist(Base):
    """Explicitly registered artist, keyed by normalized name."""

    __tablename__ = "artists"

    name = Column(String(255), primary_key=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Artist {self.name}>"

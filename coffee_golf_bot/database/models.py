from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class StoredDocument(Base):
    """A whole JSON document stored as a single row, keyed by name."""
    __tablename__ = 'documents'

    key = Column(String(200), primary_key=True)
    body = Column(Text, nullable=False)

    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StoredDocument(key='{self.key}', bytes={len(self.body or '')})>"

"""
Generic document table backing the SQL record store.

Every collection (applications, jobs, application_history, users) lives in
this one table, keyed by (collection, id). The document body is stored as
JSON and the version column drives conditional writes.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from app.core.database import Base


class StoredRecord(Base):
    """A single keyed document in a named collection."""
    __tablename__ = "records"

    collection = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)

    # Incremented on every write; compared on conditional patches
    version = Column(Integer, nullable=False, default=1)

    data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<StoredRecord(collection='{self.collection}', id='{self.id}', version={self.version})>"

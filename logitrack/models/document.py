# logitrack/models/document.py
"""
Document table: one row per document, for every collection.
The field-bag is stored as JSON exactly as written (timestamps encoded by
SqlDocumentStore), so the table never needs a migration when fields change.
"""

from sqlalchemy import Column, String, DateTime, JSON
from logitrack.database import Base


class Document(Base):
    __tablename__ = "documents"

    collection = Column(String(100), primary_key=True)
    id = Column(String(64), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Document {self.collection}/{self.id}>"

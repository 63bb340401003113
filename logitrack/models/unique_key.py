# logitrack/models/unique_key.py
"""
Claimed unique values (e.g. truck license plates).
The composite unique constraint is what makes create-with-unique a
conditional insert: two concurrent claims for the same value cannot both
commit.
"""

from sqlalchemy import Column, Integer, String, UniqueConstraint
from logitrack.database import Base


class UniqueKey(Base):
    __tablename__ = "unique_keys"
    __table_args__ = (
        UniqueConstraint("collection", "field", "value", name="uq_unique_keys_value"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(100), nullable=False)
    field = Column(String(100), nullable=False)
    value = Column(String(500), nullable=False)
    document_id = Column(String(64), nullable=False, index=True)

    def __repr__(self):
        return f"<UniqueKey {self.collection}.{self.field}={self.value} doc={self.document_id}>"

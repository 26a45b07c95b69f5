from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from .db import Base


class StorageEntry(Base):
	__tablename__ = "local_storage"
	# One row per key; values are opaque strings (plain URL or a JSON document)
	key = Column(String(128), primary_key=True, index=True)
	value = Column(Text, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

"""Key-value storage port.

Business code never talks to the database directly; it goes through an
object exposing ``get(key)`` and ``set(key, value)``. Each ``set`` is a
single committed write, last write wins.
"""

from __future__ import annotations
import logging
from typing import Dict, Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker

from .models import StorageEntry

logger = logging.getLogger(__name__)

SHEET_URL_KEY = "edulog_sheet_url"
RECORDS_KEY = "edulog_records"


class KeyValueStorage(Protocol):
	def get(self, key: str) -> Optional[str]: ...

	def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
	def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
		self._data: Dict[str, str] = dict(initial or {})

	def get(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set(self, key: str, value: str) -> None:
		self._data[key] = value


class SqlStorage:
	def __init__(self, session_factory: sessionmaker) -> None:
		self._session_factory = session_factory

	def get(self, key: str) -> Optional[str]:
		db: Session = self._session_factory()
		try:
			row = db.get(StorageEntry, key)
			return row.value if row is not None else None
		finally:
			db.close()

	def set(self, key: str, value: str) -> None:
		db: Session = self._session_factory()
		try:
			db.merge(StorageEntry(key=key, value=value))
			db.commit()
		except Exception:
			db.rollback()
			raise
		finally:
			db.close()
		logger.debug("stored %s (%d chars)", key, len(value))

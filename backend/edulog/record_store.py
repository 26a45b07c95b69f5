from __future__ import annotations
import json
import logging
import time
import uuid
from datetime import date, datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from pydantic import TypeAdapter, ValidationError

from .errors import StorageWriteError
from .schemas import ActivityRecord, DateGroup, Student
from .storage import RECORDS_KEY, KeyValueStorage

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[ActivityRecord])


def now_ms() -> int:
	return int(time.time() * 1000)


def format_korean_date(day: date) -> str:
	# Matches toLocaleDateString('ko-KR'), e.g. "2026. 10. 18."
	return f"{day.year}. {day.month}. {day.day}."


class RecordStore:
	"""Owns the activity record list and mirrors it to storage.

	The list is kept most-recent-first. Every create/update writes the whole
	list back before returning, so memory and storage never diverge.
	"""

	def __init__(self, storage: KeyValueStorage) -> None:
		self._storage = storage
		self._records: List[ActivityRecord] = []

	def load(self) -> bool:
		"""Read the persisted list. Returns False when the stored value was malformed."""
		raw = self._storage.get(RECORDS_KEY)
		if raw is None:
			self._records = []
			return True
		try:
			self._records = _records_adapter.validate_json(raw)
		except (ValidationError, ValueError) as e:
			logger.warning("persisted record list is malformed, starting empty: %s", e)
			self._records = []
			return False
		logger.debug("loaded %d records", len(self._records))
		return True

	def _commit(self, records: List[ActivityRecord]) -> None:
		# Storage first: memory only moves once the write succeeded
		payload = json.dumps([r.to_storage() for r in records], ensure_ascii=False)
		try:
			self._storage.set(RECORDS_KEY, payload)
		except Exception as e:
			logger.error("failed to persist %d records: %s", len(records), e)
			raise StorageWriteError(f"could not persist records: {e}") from e
		self._records = records

	def create(
		self,
		student: Student,
		class_id: str,
		class_name: str,
		content: str,
		*,
		now: Optional[int] = None,
	) -> ActivityRecord:
		record = ActivityRecord(
			id=str(uuid.uuid4()),
			student_id=student.id,
			student_name=student.name,
			student_number=student.number,
			class_id=class_id,
			class_name=class_name,
			content=content,
			timestamp=now if now is not None else now_ms(),
		)
		self._commit([record, *self._records])
		return record.model_copy()

	def update(self, record_id: str, content: str) -> Optional[ActivityRecord]:
		for idx, record in enumerate(self._records):
			if record.id == record_id:
				updated = record.model_copy(update={"content": content})
				self._commit([*self._records[:idx], updated, *self._records[idx + 1:]])
				return updated.model_copy()
		return None

	def get(self, record_id: str) -> Optional[ActivityRecord]:
		for record in self._records:
			if record.id == record_id:
				return record.model_copy()
		return None

	def all(self) -> List[ActivityRecord]:
		return [r.model_copy() for r in self._records]

	def __len__(self) -> int:
		return len(self._records)

	def grouped_by_date(self, tz: str = "Asia/Seoul") -> List[DateGroup]:
		zone = ZoneInfo(tz)
		groups: Dict[date, List[ActivityRecord]] = {}
		for record in self._records:
			day = datetime.fromtimestamp(record.timestamp / 1000, tz=zone).date()
			groups.setdefault(day, []).append(record.model_copy())
		ordered = sorted(groups.items(), key=lambda item: item[0], reverse=True)
		return [DateGroup(date=format_korean_date(day), records=records) for day, records in ordered]

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Deque, List, Optional

from .errors import ControllerBusy, RecordNotFound, RosterFetchError, StorageWriteError
from .record_store import RecordStore
from .rewrite import polish_record
from .roster import RosterAdapter, RosterState
from .schemas import ActivityRecord, Notification, Student, SyncPayload
from .settings import settings
from .storage import SHEET_URL_KEY, KeyValueStorage
from .sync import SyncForwarder

logger = logging.getLogger(__name__)

Rewriter = Callable[[str, Optional[Callable[[str], None]]], Awaitable[str]]

MSG_ROSTER_FAILED = "명단 불러오기 실패. URL을 확인해 주세요."
MSG_SETTINGS_SAVED = "설정이 저장되었습니다."
MSG_RECORD_UPDATED = "기록이 수정되었습니다."
MSG_RECORD_SAVED = "임시 저장되었습니다."
MSG_LOCAL_SAVE_FAILED = "기록을 저장하지 못했습니다. 다시 시도해 주세요."
MSG_SYNC_DONE = "구글 시트 전송 완료"
MSG_SYNC_FAILED = "시트 전송 실패"
MSG_POLISH_DONE = "AI 변환 완료"
MSG_POLISH_FAILED = "변환 중 오류 발생"
MSG_RECORDS_CORRUPT = "저장된 기록을 읽지 못해 빈 목록으로 시작합니다."


class SaveState(str, Enum):
	IDLE = "idle"
	SAVING_LOCAL = "saving-local"
	SYNCING = "syncing"
	DONE = "done"


@dataclass
class SaveOutcome:
	record: ActivityRecord
	created: bool
	# None when no sync was attempted
	synced: Optional[bool]
	# States this save action passed through, ending in DONE
	states: List[SaveState] = field(default_factory=list)

	@property
	def state(self) -> SaveState:
		return self.states[-1] if self.states else SaveState.IDLE


class AppController:
	def __init__(
		self,
		storage: KeyValueStorage,
		*,
		roster_adapter: Optional[RosterAdapter] = None,
		sync_forwarder: Optional[SyncForwarder] = None,
		rewriter: Optional[Rewriter] = None,
		timezone: Optional[str] = None,
	) -> None:
		self.storage = storage
		self.records = RecordStore(storage)
		self.roster = RosterState()
		self._roster_adapter = roster_adapter or RosterAdapter()
		self._sync = sync_forwarder or SyncForwarder()
		self._rewriter: Rewriter = rewriter or polish_record
		self.timezone = timezone or settings.timezone
		self.notifications: Deque[Notification] = deque(maxlen=50)
		self.loading = False
		self.rewriting = False
		self._syncs_in_flight = 0

	def notify(self, text: str, kind: str = "success") -> None:
		self.notifications.append(Notification(text=text, kind=kind))

	def drain_notifications(self) -> List[Notification]:
		items = list(self.notifications)
		self.notifications.clear()
		return items

	@property
	def sheet_url(self) -> str:
		return self.storage.get(SHEET_URL_KEY) or ""

	async def boot(self) -> None:
		if not self.records.load():
			self.notify(MSG_RECORDS_CORRUPT, "error")
		if self.sheet_url:
			await self.refresh_roster()

	async def refresh_roster(self, url: Optional[str] = None) -> bool:
		target = (url or self.sheet_url).strip()
		if not target:
			return False
		self.loading = True
		try:
			await self.roster.refresh(self._roster_adapter, target)
		except RosterFetchError:
			self.notify(MSG_ROSTER_FAILED, "error")
			return False
		finally:
			self.loading = False
		self.storage.set(SHEET_URL_KEY, target)
		return True

	async def save_settings(self, url: str) -> bool:
		target = (url or "").strip()
		self.storage.set(SHEET_URL_KEY, target)
		self.notify(MSG_SETTINGS_SAVED)
		return await self.refresh_roster()

	async def polish(self, content: str, on_status: Optional[Callable[[str], None]] = None) -> str:
		if self.rewriting:
			raise ControllerBusy("a rewrite is already running")
		if not (content or "").strip():
			raise ValueError("content is required")
		self.rewriting = True
		try:
			text = await self._rewriter(content, on_status)
		except Exception:
			logger.exception("rewrite failed")
			self.notify(MSG_POLISH_FAILED, "error")
			return content
		finally:
			self.rewriting = False
		self.notify(MSG_POLISH_DONE)
		return text

	async def save_record(
		self,
		content: str,
		*,
		student: Optional[Student] = None,
		class_id: Optional[str] = None,
		editing_record_id: Optional[str] = None,
	) -> SaveOutcome:
		# Only a running rewrite locks saving; an earlier save may still be syncing
		if self.rewriting:
			raise ControllerBusy("editing controls are locked")
		current = (content or "").strip()
		if not current:
			raise ValueError("content is required")
		if editing_record_id is None and student is None:
			raise ValueError("student is required for a new record")

		states = [SaveState.SAVING_LOCAL]
		try:
			if editing_record_id is not None:
				record = self.records.update(editing_record_id, current)
			else:
				active = self.roster.find_class(class_id)
				record = self.records.create(student, class_id or "", active.name if active else "", current)
		except StorageWriteError:
			self.notify(MSG_LOCAL_SAVE_FAILED, "error")
			raise

		if editing_record_id is not None:
			if record is None:
				raise RecordNotFound(editing_record_id)
			self.notify(MSG_RECORD_UPDATED)
			return SaveOutcome(record=record, created=False, synced=None, states=[*states, SaveState.DONE])

		self.notify(MSG_RECORD_SAVED)
		url = self.sheet_url
		if not url:
			return SaveOutcome(record=record, created=True, synced=None, states=[*states, SaveState.DONE])

		states.append(SaveState.SYNCING)
		self._syncs_in_flight += 1
		try:
			synced = await self._sync.push(url, SyncPayload.from_record(record))
		finally:
			self._syncs_in_flight -= 1
		if synced:
			self.notify(MSG_SYNC_DONE)
		else:
			self.notify(MSG_SYNC_FAILED, "error")
		return SaveOutcome(record=record, created=True, synced=synced, states=[*states, SaveState.DONE])

	@property
	def syncing(self) -> bool:
		return self._syncs_in_flight > 0

	def status(self) -> dict:
		return {
			"connected": self.roster.connected,
			"loading": self.loading,
			"syncing": self.syncing,
			"rewriting": self.rewriting,
			"sheetUrl": self.sheet_url,
			"classCount": len(self.roster.classes),
			"recordCount": len(self.records),
			"geminiConfigured": bool(settings.gemini_api_key),
		}

	async def aclose(self) -> None:
		await self._roster_adapter.aclose()
		await self._sync.aclose()

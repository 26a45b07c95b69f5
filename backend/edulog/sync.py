from __future__ import annotations
import logging
from typing import Optional

import httpx

from .schemas import SyncPayload
from .settings import settings

logger = logging.getLogger(__name__)


class SyncForwarder:
	"""One-way push of a new record to the spreadsheet web app.

	The Apps Script endpoint answers through a redirect that is not followed,
	and the response is never read: `push` only reports whether the request
	left this process, not whether the sheet accepted it.
	"""

	def __init__(self, *, client: Optional[httpx.AsyncClient] = None) -> None:
		self._client = client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)

	async def push(self, url: str, payload: SyncPayload) -> bool:
		body = payload.model_dump_json(by_alias=True)
		try:
			await self._client.post(url, content=body.encode("utf-8"), headers={"Content-Type": "text/plain;charset=UTF-8"})
		except httpx.HTTPError as e:
			logger.warning("sheet sync failed: %s", e)
			return False
		logger.debug("sheet sync dispatched for %s #%s", payload.class_name, payload.student_number)
		return True

	async def aclose(self) -> None:
		await self._client.aclose()

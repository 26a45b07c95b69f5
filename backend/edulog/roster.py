from __future__ import annotations
import logging
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from .errors import RosterFetchError
from .schemas import ClassGroup
from .settings import settings

logger = logging.getLogger(__name__)

_roster_adapter = TypeAdapter(List[ClassGroup])


class RosterAdapter:
	def __init__(self, *, client: Optional[httpx.AsyncClient] = None) -> None:
		self._client = client or httpx.AsyncClient(timeout=settings.http_timeout_seconds, follow_redirects=True)

	async def fetch(self, url: str) -> List[ClassGroup]:
		try:
			r = await self._client.get(url)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise RosterFetchError(f"roster endpoint returned {http_err.response.status_code}", transport=True) from http_err
		except httpx.RequestError as net_err:
			raise RosterFetchError(f"roster request failed: {net_err}", transport=True) from net_err
		try:
			data = r.json()
		except ValueError as e:
			raise RosterFetchError("roster response is not JSON", transport=False) from e
		if not isinstance(data, list):
			raise RosterFetchError(f"roster response is not a list (got {type(data).__name__})", transport=False)
		try:
			return _roster_adapter.validate_python(data)
		except ValidationError as e:
			raise RosterFetchError(f"roster response has invalid class groups: {e.error_count()} errors", transport=False) from e

	async def aclose(self) -> None:
		await self._client.aclose()


class RosterState:
	def __init__(self) -> None:
		self.classes: List[ClassGroup] = []
		self.connected: bool = False

	async def refresh(self, adapter: RosterAdapter, url: Optional[str]) -> bool:
		"""Replace the roster from `url`.

		Returns False without a request when no URL is given. On failure the
		previous classes are kept and the error is re-raised; only transport
		failures clear the connected flag.
		"""
		target = (url or "").strip()
		if not target:
			return False
		try:
			classes = await adapter.fetch(target)
		except RosterFetchError as e:
			if e.transport:
				self.connected = False
			logger.warning("roster refresh failed: %s", e)
			raise
		self.classes = classes
		self.connected = True
		logger.info("roster loaded: %d classes", len(classes))
		return True

	def search(self, query: str = "") -> List[ClassGroup]:
		needle = (query or "").lower()
		return [c for c in self.classes if needle in c.name.lower()]

	def find_class(self, class_id: Optional[str]) -> Optional[ClassGroup]:
		if not class_id:
			return None
		for c in self.classes:
			if c.id == class_id:
				return c
		return None

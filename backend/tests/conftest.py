"""
Shared fixtures. Every outbound HTTP call goes through httpx.MockTransport;
storage is in-memory unless a test asks for SQLite.
"""
import json

import httpx
import pytest

from edulog.controller import AppController
from edulog.roster import RosterAdapter
from edulog.schemas import Student
from edulog.storage import RECORDS_KEY, MemoryStorage
from edulog.sync import SyncForwarder

SHEET_URL = "https://script.google.com/macros/s/abc/exec"

ROSTER = [
	{
		"id": "1-1",
		"name": "1-1",
		"students": [
			{"id": "1-1_5", "number": 5, "name": "Kim"},
			{"id": "1-1_7", "number": 7, "name": "Lee"},
		],
	},
	{"id": "2-3", "name": "2-3", "students": [{"id": "2-3_1", "number": 1, "name": "Park"}]},
]


class SheetServer:
	"""Fake Apps Script web app: serves the roster on GET, records POST bodies."""

	def __init__(self, roster=None):
		self.roster = ROSTER if roster is None else roster
		self.posts = []
		self.gets = 0
		self.fail_posts = False
		self.fail_gets = False

	def handler(self, request: httpx.Request) -> httpx.Response:
		if request.method == "GET":
			self.gets += 1
			if self.fail_gets:
				raise httpx.ConnectError("connection refused", request=request)
			if isinstance(self.roster, (str, bytes)):
				return httpx.Response(200, content=self.roster)
			return httpx.Response(200, json=self.roster)
		if self.fail_posts:
			raise httpx.ConnectError("connection refused", request=request)
		self.posts.append(json.loads(request.content))
		return httpx.Response(302, headers={"Location": "https://script.googleusercontent.com/echo"})

	def client(self) -> httpx.AsyncClient:
		return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FailingStorage(MemoryStorage):
	"""Reads work; writes to the record list fail once `broken` is set."""

	def __init__(self, initial=None):
		super().__init__(initial)
		self.broken = False

	def set(self, key, value):
		if self.broken and key == RECORDS_KEY:
			raise RuntimeError("disk full")
		super().set(key, value)


@pytest.fixture
def sheet():
	return SheetServer()


@pytest.fixture
def storage():
	return MemoryStorage()


@pytest.fixture
def kim():
	return Student(id="1-1_5", name="Kim", number=5)


async def fake_rewriter(text, on_status=None):
	if on_status is not None:
		on_status("working")
	return f"{text.strip()} 돋보임."


@pytest.fixture
def make_controller(storage, sheet):
	def _make(rewriter=fake_rewriter, storage=storage):
		return AppController(
			storage,
			roster_adapter=RosterAdapter(client=sheet.client()),
			sync_forwarder=SyncForwarder(client=sheet.client()),
			rewriter=rewriter,
			timezone="Asia/Seoul",
		)
	return _make

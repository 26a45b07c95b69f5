"""
Roster fetch: wholesale replacement, transport vs payload failures, search.
"""
import asyncio

import httpx
import pytest

from edulog.errors import RosterFetchError
from edulog.roster import RosterAdapter, RosterState
from edulog.schemas import ClassGroup
from conftest import ROSTER, SHEET_URL, SheetServer


def run(coro):
	return asyncio.run(coro)


@pytest.fixture
def loaded(sheet):
	state = RosterState()
	assert run(state.refresh(RosterAdapter(client=sheet.client()), SHEET_URL))
	return state


def test_fetch_parses_class_groups(sheet):
	classes = run(RosterAdapter(client=sheet.client()).fetch(SHEET_URL))
	assert [c.id for c in classes] == ["1-1", "2-3"]
	assert classes[0].students[0].name == "Kim"
	assert classes[0].students[0].number == 5


def test_refresh_marks_connected(loaded):
	assert loaded.connected
	assert len(loaded.classes) == 2


def test_blank_url_makes_no_request(sheet):
	state = RosterState()
	assert run(state.refresh(RosterAdapter(client=sheet.client()), "   ")) is False
	assert sheet.gets == 0


def test_refresh_replaces_wholesale(loaded):
	replacement = SheetServer(roster=[{"id": "3-1", "name": "3-1", "students": []}])
	run(loaded.refresh(RosterAdapter(client=replacement.client()), SHEET_URL))
	assert [c.id for c in loaded.classes] == ["3-1"]


@pytest.mark.parametrize("payload", [{"classes": ROSTER}, "plain text", [{"id": "x"}]])
def test_bad_payload_keeps_roster_and_connection(loaded, payload):
	bad = SheetServer(roster=payload)
	before = list(loaded.classes)
	with pytest.raises(RosterFetchError) as exc:
		run(loaded.refresh(RosterAdapter(client=bad.client()), SHEET_URL))
	assert exc.value.transport is False
	assert loaded.classes == before
	assert loaded.connected


def test_network_failure_clears_connection(loaded):
	down = SheetServer()
	down.fail_gets = True
	before = list(loaded.classes)
	with pytest.raises(RosterFetchError) as exc:
		run(loaded.refresh(RosterAdapter(client=down.client()), SHEET_URL))
	assert exc.value.transport is True
	assert loaded.classes == before
	assert not loaded.connected


def test_http_error_clears_connection(loaded):
	client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404, text="nope")))
	with pytest.raises(RosterFetchError) as exc:
		run(loaded.refresh(RosterAdapter(client=client), SHEET_URL))
	assert exc.value.transport is True
	assert not loaded.connected
	assert len(loaded.classes) == 2


def test_search_is_case_insensitive():
	state = RosterState()
	state.classes = [ClassGroup(id="a", name="Science Club"), ClassGroup(id="b", name="1-1")]
	assert [c.id for c in state.search("SCIENCE")] == ["a"]
	assert state.search("art") == []


def test_search_filters_by_name(loaded):
	assert [c.id for c in loaded.search("1-")] == ["1-1"]
	assert [c.id for c in loaded.search("")] == ["1-1", "2-3"]


def test_find_class(loaded):
	assert loaded.find_class("2-3").students[0].name == "Park"
	assert loaded.find_class("9-9") is None
	assert loaded.find_class(None) is None


def test_numeric_sheet_cells_are_accepted():
	# A name cell holding only digits comes through as a JSON number
	sheet = SheetServer(roster=[{"id": "1-1", "name": "1-1", "students": [{"id": "1-1_3", "number": 3, "name": 2024}]}])
	classes = run(RosterAdapter(client=sheet.client()).fetch(SHEET_URL))
	assert classes[0].students[0].name == "2024"

"""
SQLite-backed key-value storage used in place of browser storage.
"""
from edulog.db import init_db, make_engine, make_session_factory
from edulog.record_store import RecordStore
from edulog.storage import SHEET_URL_KEY, SqlStorage


def make_storage(tmp_path):
	engine = make_engine(f"sqlite:///{tmp_path / 'edulog.db'}")
	init_db(engine)
	return SqlStorage(make_session_factory(engine))


def test_get_missing_key(tmp_path):
	assert make_storage(tmp_path).get("nothing") is None


def test_set_overwrites(tmp_path):
	storage = make_storage(tmp_path)
	storage.set(SHEET_URL_KEY, "https://a.test")
	storage.set(SHEET_URL_KEY, "https://b.test")
	assert storage.get(SHEET_URL_KEY) == "https://b.test"


def test_records_survive_new_storage_instance(tmp_path, kim):
	store = RecordStore(make_storage(tmp_path))
	created = store.create(kim, "1-1", "1-1", "협동 학습에서 친구를 도움.")
	store.update(created.id, "협동 학습에서 친구를 적극적으로 도움.")

	reopened = RecordStore(make_storage(tmp_path))
	assert reopened.load()
	assert reopened.all() == store.all()
	assert reopened.get(created.id).content == "협동 학습에서 친구를 적극적으로 도움."

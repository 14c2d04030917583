from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from openapi_tryout.parser.openapi import SpecLoadError
from openapi_tryout.storage import SpecStore, StoredSpec, parse_stored

FIXTURES = Path(__file__).parent / "fixtures"


def _spec(spec_id="petstore", **overrides) -> StoredSpec:
    defaults = dict(
        id=spec_id,
        title="Petstore",
        content=(FIXTURES / "petstore.yaml").read_text(encoding="utf-8"),
        version="1.0.0",
    )
    defaults.update(overrides)
    return StoredSpec(**defaults)


class TestSpecStore:
    def test_save_and_get(self, tmp_path):
        store = SpecStore(tmp_path / "specs")
        store.save_spec(_spec())
        loaded = store.get_spec("petstore")
        assert loaded is not None
        assert loaded.title == "Petstore"
        assert "openapi: 3.0.3" in loaded.content

    def test_get_missing(self, tmp_path):
        assert SpecStore(tmp_path).get_spec("nope") is None

    def test_invalid_id_rejected(self, tmp_path):
        store = SpecStore(tmp_path)
        with pytest.raises(ValueError):
            store.get_spec("../etc/passwd")
        with pytest.raises(ValueError):
            store.save_spec(_spec(spec_id="a/b"))

    def test_replace_keeps_created_at(self, tmp_path):
        store = SpecStore(tmp_path)
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        store.save_spec(_spec(created_at=created, updated_at=created))
        saved = store.save_spec(_spec(title="Renamed"))
        assert saved.created_at == created
        assert saved.updated_at > created
        assert store.get_spec("petstore").title == "Renamed"

    def test_list_most_recent_first(self, tmp_path):
        store = SpecStore(tmp_path)
        now = datetime.now(timezone.utc)
        store.save_spec(_spec("old", updated_at=now - timedelta(days=1)))
        store.save_spec(_spec("new", updated_at=now))
        assert [s.id for s in store.list_specs()] == ["new", "old"]

    def test_list_skips_corrupt_records(self, tmp_path):
        store = SpecStore(tmp_path)
        store.save_spec(_spec())
        (tmp_path / "broken.json").write_text("{}", encoding="utf-8")
        (tmp_path / "not.an.id.json").write_text("{}", encoding="utf-8")
        assert [s.id for s in store.list_specs()] == ["petstore"]

    def test_list_missing_dir(self, tmp_path):
        assert SpecStore(tmp_path / "absent").list_specs() == []

    def test_delete(self, tmp_path):
        store = SpecStore(tmp_path)
        store.save_spec(_spec())
        assert store.delete_spec("petstore") is True
        assert store.delete_spec("petstore") is False
        assert store.get_spec("petstore") is None


class TestParseStored:
    def test_parses_content(self):
        doc = parse_stored(_spec())
        assert doc.info.title == "Petstore"

    def test_bad_content(self):
        with pytest.raises(SpecLoadError):
            parse_stored(_spec(content="just text"))

"""Unit tests for flavor records and catalog stores."""

import asyncio
import json
import logging
from types import SimpleNamespace

import pytest

from config.settings import Settings
from flavormix.core.catalog import (
    FirestoreCatalogStore,
    FlavorRecord,
    JsonCatalogStore,
    create_catalog_store
)
from flavormix.errors import UpstreamFailure


class TestFlavorRecord:
    """Tests for FlavorRecord dataclass."""

    def test_from_spanish_document(self):
        """Test creating a record from the original collection's keys."""
        record = FlavorRecord.from_dict({
            "Nombre": "Love 66",
            "Tipo": "Fruity",
            "Ingredientes": "passion fruit, watermelon"
        })

        assert record.name == "Love 66"
        assert record.type == "Fruity"
        assert record.ingredients == "passion fruit, watermelon"

    def test_from_english_document(self):
        """Test creating a record from English keys."""
        record = FlavorRecord.from_dict({"name": "Mint", "type": "Herbal", "ingredients": "mint leaves"})

        assert record.name == "Mint"
        assert record.ingredients_text == "mint leaves"

    def test_english_keys_take_precedence(self):
        """Test English keys win when both are present."""
        record = FlavorRecord.from_dict({"name": "Mint", "Nombre": "Menta"})

        assert record.name == "Mint"

    def test_ingredient_list(self):
        """Test list ingredients keep their order."""
        record = FlavorRecord.from_dict({"name": "Lady Killer", "ingredients": ["mango", "melon"]})

        assert record.ingredients == ("mango", "melon")
        assert record.ingredients_text == "mango, melon"
        assert record.to_dict()["ingredients"] == ["mango", "melon"]

    def test_missing_fields(self):
        """Test missing attributes become empty text."""
        record = FlavorRecord.from_dict({"Nombre": "Grape"})

        assert record.name == "Grape"
        assert record.type == ""
        assert record.ingredients_text == ""

    def test_record_is_immutable(self):
        """Test records cannot be modified after creation."""
        record = FlavorRecord(name="Mint")

        with pytest.raises(AttributeError):
            record.name = "Grape"


class TestJsonCatalogStore:
    """Tests for the JSON file catalog."""

    def _write(self, tmp_path, data):
        (tmp_path / "flavors.json").write_text(json.dumps(data), encoding="utf-8")

    def test_fetch_all(self, tmp_path):
        """Test records are returned in file order."""
        self._write(tmp_path, [
            {"Nombre": "Mint", "Tipo": "Herbal", "Ingredientes": "mint leaves"},
            {"Nombre": "Grape", "Tipo": "Fruity", "Ingredientes": "grape"},
        ])
        store = JsonCatalogStore(str(tmp_path))

        records = asyncio.run(store.fetch_all())

        assert [r.name for r in records] == ["Mint", "Grape"]

    def test_rereads_file_each_fetch(self, tmp_path):
        """Test each fetch sees the current file contents."""
        self._write(tmp_path, [{"name": "Mint"}])
        store = JsonCatalogStore(str(tmp_path))
        asyncio.run(store.fetch_all())

        self._write(tmp_path, [{"name": "Grape"}, {"name": "Peach"}])
        records = asyncio.run(store.fetch_all())

        assert [r.name for r in records] == ["Grape", "Peach"]

    def test_missing_file(self, tmp_path):
        """Test a missing catalog file is an upstream failure."""
        store = JsonCatalogStore(str(tmp_path), "missing.json")

        with pytest.raises(UpstreamFailure):
            asyncio.run(store.fetch_all())

    def test_invalid_json(self, tmp_path):
        """Test an unparsable catalog file is an upstream failure."""
        (tmp_path / "flavors.json").write_text("[{", encoding="utf-8")
        store = JsonCatalogStore(str(tmp_path))

        with pytest.raises(UpstreamFailure):
            asyncio.run(store.fetch_all())

    def test_non_array_file(self, tmp_path):
        """Test a catalog that is not an array is rejected."""
        self._write(tmp_path, {"name": "Mint"})
        store = JsonCatalogStore(str(tmp_path))

        with pytest.raises(UpstreamFailure):
            asyncio.run(store.fetch_all())

    def test_non_object_entries_are_logged(self, tmp_path, caplog):
        """Test entries that are not objects are skipped with a warning."""
        self._write(tmp_path, [{"name": "Mint"}, "Grape", 7, {"name": "Peach"}])
        store = JsonCatalogStore(str(tmp_path))

        with caplog.at_level(logging.WARNING, logger="flavormix.core.catalog"):
            records = asyncio.run(store.fetch_all())

        assert [r.name for r in records] == ["Mint", "Peach"]
        skipped = [r for r in caplog.records if "Skipping catalog entry" in r.getMessage()]
        assert len(skipped) == 2
        assert "entry 1" in skipped[0].getMessage()
        assert "got str" in skipped[0].getMessage()

    def test_bundled_catalog(self):
        """Test the bundled sample catalog loads."""
        settings = Settings()
        store = JsonCatalogStore(settings.data_dir, settings.catalog_file)

        records = asyncio.run(store.fetch_all())

        assert len(records) > 0
        assert all(r.name for r in records)


class FakeFirestoreClient:
    """Minimal stand-in for firestore.AsyncClient."""

    def __init__(self, documents=None, error=None):
        self.documents = documents or []
        self.error = error
        self.collections = []
        self.closed = False

    def collection(self, name):
        self.collections.append(name)
        return SimpleNamespace(stream=self._stream)

    async def _stream(self):
        for data in self.documents:
            yield SimpleNamespace(to_dict=lambda data=data: data)
        if self.error is not None:
            raise self.error

    def close(self):
        self.closed = True


class TestFirestoreCatalogStore:
    """Tests for the Firestore catalog."""

    def test_fetch_all(self):
        """Test documents are streamed from the configured collection."""
        client = FakeFirestoreClient(documents=[
            {"Nombre": "Mint", "Tipo": "Herbal", "Ingredientes": "mint leaves"},
            {"Nombre": "Double Apple", "Tipo": "Classic", "Ingredientes": ["apple", "anise"]},
        ])
        store = FirestoreCatalogStore(collection="iaSabor", client=client)

        records = asyncio.run(store.fetch_all())

        assert client.collections == ["iaSabor"]
        assert [r.name for r in records] == ["Mint", "Double Apple"]
        assert records[1].ingredients_text == "apple, anise"

    def test_stream_error(self):
        """Test a store error becomes an upstream failure."""
        client = FakeFirestoreClient(
            documents=[{"Nombre": "Mint"}],
            error=PermissionError("missing permission")
        )
        store = FirestoreCatalogStore(client=client)

        with pytest.raises(UpstreamFailure) as exc_info:
            asyncio.run(store.fetch_all())

        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_not_connected(self):
        """Test fetching before connect fails."""
        store = FirestoreCatalogStore()

        with pytest.raises(UpstreamFailure):
            asyncio.run(store.fetch_all())

    def test_close(self):
        """Test close releases the client."""
        client = FakeFirestoreClient()
        store = FirestoreCatalogStore(client=client)

        asyncio.run(store.close())

        assert client.closed


class TestCreateCatalogStore:
    """Tests for backend selection."""

    def test_mock_mode_uses_json(self, tmp_path):
        """Test mock mode selects the JSON catalog."""
        settings = Settings(use_mock=True, data_dir=str(tmp_path), catalog_file="c.json")

        store = create_catalog_store(settings)

        assert isinstance(store, JsonCatalogStore)
        assert store.file_path == tmp_path / "c.json"

    def test_live_mode_uses_firestore(self, monkeypatch):
        """Test live mode builds and connects the Firestore catalog."""
        created = []

        def fake_async_client(project=None):
            client = FakeFirestoreClient(documents=[{"Nombre": "Mint"}])
            created.append(project)
            return client

        monkeypatch.setattr("flavormix.core.catalog.firestore.AsyncClient", fake_async_client)
        settings = Settings(use_mock=False, firestore_project="flavor-project", flavor_collection="iaSabor")

        store = create_catalog_store(settings)

        assert isinstance(store, FirestoreCatalogStore)
        assert created == ["flavor-project"]
        assert store.collection == "iaSabor"
        records = asyncio.run(store.fetch_all())
        assert [r.name for r in records] == ["Mint"]

    def test_live_mode_connect_failure(self, monkeypatch):
        """Test a client construction error surfaces at creation time."""
        def failing_async_client(project=None):
            raise RuntimeError("default credentials not found")

        monkeypatch.setattr("flavormix.core.catalog.firestore.AsyncClient", failing_async_client)

        with pytest.raises(RuntimeError):
            create_catalog_store(Settings(use_mock=False))

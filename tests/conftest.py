"""Shared fixtures and fakes for the test suite."""

import os
import sys
from pathlib import Path
from typing import List, Optional

import pytest

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

os.environ.setdefault("FLAVORMIX_USE_MOCK", "true")
os.environ.setdefault("FLAVORMIX_DATA_DIR", str(ROOT / "data"))

from flavormix.core.catalog import CatalogStore, FlavorRecord
from flavormix.core.model_interface import BaseCompletionClient
from flavormix.models.schemas import ChatMessage


class FakeCatalogStore(CatalogStore):
    """Catalog store that returns canned records or raises."""

    backend_name = "fake"

    def __init__(self, records: Optional[List[FlavorRecord]] = None, error: Optional[Exception] = None):
        self.records = list(records or [])
        self.error = error
        self.calls = 0

    async def fetch_all(self) -> List[FlavorRecord]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)


class FakeCompletionClient(BaseCompletionClient):
    """Completion client that records its calls."""

    def __init__(self, text: str = "A mix of Mint and Blue Mist.", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[dict] = []

    async def complete(self, messages: List[ChatMessage], max_tokens: int = 150) -> str:
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.text

    def is_loaded(self) -> bool:
        return True

    def get_model_name(self) -> str:
        return "fake-model"


@pytest.fixture
def mint_catalog():
    """A one-flavor catalog."""
    return [FlavorRecord(name="Mint", type="Herbal", ingredients="mint leaves")]


@pytest.fixture
def sample_catalog():
    """A small mixed catalog."""
    return [
        FlavorRecord(name="Mint", type="Herbal", ingredients="mint leaves"),
        FlavorRecord(name="Double Apple", type="Classic", ingredients="red apple, green apple, anise"),
        FlavorRecord(name="Lady Killer", type="Fruity", ingredients=("mango", "melon", "berries", "mint")),
    ]


@pytest.fixture
def valid_payload():
    """A request body with both required fields."""
    return {"userId": "user-123", "query": "relaxing"}

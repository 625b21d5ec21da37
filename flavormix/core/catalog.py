"""Flavor catalog records and the stores they are fetched from."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from google.cloud import firestore

from flavormix.errors import UpstreamFailure

logger = logging.getLogger(__name__)

# Documents in the original collection use Spanish keys
FIELD_ALIASES = {
    "name": ("name", "Nombre"),
    "type": ("type", "Tipo"),
    "ingredients": ("ingredients", "Ingredientes"),
}


def _lookup(data: dict, field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class FlavorRecord:
    """Flavor data class."""
    name: str
    type: str = ""
    ingredients: Union[str, Tuple[str, ...]] = ""

    @property
    def ingredients_text(self) -> str:
        """Return the ingredients as a single line of text."""
        if isinstance(self.ingredients, str):
            return self.ingredients
        return ", ".join(self.ingredients)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        ingredients = self.ingredients
        if not isinstance(ingredients, str):
            ingredients = list(ingredients)
        return {
            "name": self.name,
            "type": self.type,
            "ingredients": ingredients
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FlavorRecord":
        """Create FlavorRecord from a store document."""
        ingredients = _lookup(data, "ingredients")
        if ingredients is None:
            ingredients = ""
        elif isinstance(ingredients, (list, tuple)):
            ingredients = tuple(str(item) for item in ingredients)
        else:
            ingredients = str(ingredients)

        name = _lookup(data, "name")
        flavor_type = _lookup(data, "type")
        return cls(
            name="" if name is None else str(name),
            type="" if flavor_type is None else str(flavor_type),
            ingredients=ingredients
        )


class CatalogStore(ABC):
    """Abstract base class for flavor catalog stores."""

    backend_name: str = "unknown"

    @abstractmethod
    async def fetch_all(self) -> List[FlavorRecord]:
        """Fetch every flavor record, in store order."""
        pass

    async def close(self) -> None:
        """Release any resources held by the store."""
        return None


class JsonCatalogStore(CatalogStore):
    """Reads the catalog from a JSON file on every fetch."""

    backend_name = "json"

    def __init__(self, data_dir: str = "data", filename: str = "flavors.json"):
        self.data_dir = Path(data_dir)
        self.filename = filename

    @property
    def file_path(self) -> Path:
        return self.data_dir / self.filename

    async def fetch_all(self) -> List[FlavorRecord]:
        file_path = self.file_path
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise UpstreamFailure(f"Could not read flavor catalog {file_path}: {e}") from e

        if not isinstance(data, list):
            raise UpstreamFailure(f"Flavor catalog {file_path} must contain a JSON array")

        records = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                logger.warning(f"Skipping catalog entry {index} in {file_path}: expected an object, got {type(item).__name__}")
                continue
            records.append(FlavorRecord.from_dict(item))
        return records


class FirestoreCatalogStore(CatalogStore):
    """Streams the catalog collection from Cloud Firestore."""

    backend_name = "firestore"

    def __init__(
        self,
        collection: str = "iaSabor",
        project_id: Optional[str] = None,
        client: Any = None
    ):
        """Initialize the store.

        Args:
            collection: Name of the flavor collection.
            project_id: GCP project ID. If None, the ambient project is used.
            client: Optional pre-configured Firestore client (for testing).
        """
        self.collection = collection
        self._project_id = project_id
        self._client = client

    def connect(self) -> None:
        """Create the Firestore client."""
        if self._client is None:
            self._client = firestore.AsyncClient(project=self._project_id)
        logger.info(f"Connected to Firestore collection: {self.collection}")

    async def close(self) -> None:
        """Close the Firestore client."""
        if self._client:
            self._client.close()
            self._client = None

    async def fetch_all(self) -> List[FlavorRecord]:
        if self._client is None:
            raise UpstreamFailure("Firestore not connected. Call connect() first.")

        records = []
        try:
            async for doc in self._client.collection(self.collection).stream():
                records.append(FlavorRecord.from_dict(doc.to_dict() or {}))
        except Exception as e:
            raise UpstreamFailure(f"Firestore fetch from {self.collection} failed: {e}") from e
        return records


def create_catalog_store(settings) -> CatalogStore:
    """Build the catalog store for the configured mode."""
    if settings.use_mock:
        logger.info(f"Using JSON catalog at {Path(settings.data_dir) / settings.catalog_file}")
        return JsonCatalogStore(settings.data_dir, settings.catalog_file)

    store = FirestoreCatalogStore(
        collection=settings.flavor_collection,
        project_id=settings.firestore_project
    )
    store.connect()
    return store

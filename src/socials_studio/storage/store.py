"""Content store: key-indexed persistence for studio entities.

Each collection lives in one JSON file under the store root. Binary
payloads (image bytes, template backgrounds) are kept next to it in
``blobs/<collection>/<id>.bin`` so the JSON stays small and readable.

Usage:
    store = ContentStore(Path("data"))
    store.put(project)
    project = store.require(Project, project_id)
    outputs = store.find(Output, project_id=project.id)
    store.delete(Project, project.id)   # cascades to children

Each read goes to disk and each write rewrites the collection from a
fresh read, so separate store instances on one directory see each
other's rows. There is no locking; simultaneous writes are
last-writer-wins.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, Field

from ..errors import NotFoundError, StoreError
from ..utils.helpers import generate_id

_logger = logging.getLogger("content_store")


class StoredModel(BaseModel):
    """Base for persisted entities.

    Subclasses set ``collection`` and optionally ``blob_field`` (a
    ``bytes | None`` field excluded from the JSON record).
    """

    collection: ClassVar[str] = ""
    blob_field: ClassVar[str | None] = None

    id: str = Field(default_factory=generate_id)


M = TypeVar("M", bound=StoredModel)


# Children removed when a parent row is deleted: parent -> [(collection, fk)]
CASCADE_DELETE: dict[str, list[tuple[str, str]]] = {
    "projects": [
        ("outputs", "project_id"),
        ("messages", "project_id"),
        ("project_assets", "project_id"),
        ("generated_images", "project_id"),
        ("content_versions", "project_id"),
        ("project_sources", "project_id"),
        ("carousel_outputs", "project_id"),
    ],
    "carousel_templates": [
        ("template_slides", "template_id"),
    ],
}

# References cleared when the referenced row is deleted
CASCADE_SET_NULL: dict[str, list[tuple[str, str]]] = {
    "projects": [("projects", "remix_of_project_id")],
    "carousel_templates": [("carousel_outputs", "template_id")],
    "generated_images": [("generated_images", "parent_image_id")],
}


def _plain(value: Any) -> Any:
    """Convert a filter value to its JSON representation."""
    if isinstance(value, Enum):
        return value.value
    return value


class ContentStore:
    """JSON-file store with get/put/delete by key and by parent key."""

    def __init__(self, root: Path):
        """Initialize the store.

        Args:
            root: Directory holding the collection files.
        """
        self.root = Path(root)

    # -------------------------------------------------------------------------
    # File handling
    # -------------------------------------------------------------------------

    def _collection_path(self, collection: str) -> Path:
        return self.root / f"{collection}.json"

    def _blob_path(self, collection: str, key: str) -> Path:
        return self.root / "blobs" / collection / f"{key}.bin"

    def _load(self, collection: str) -> dict[str, dict[str, Any]]:
        """Read a collection from its file.

        Always reads from disk so other processes' writes are seen.
        """
        path = self._collection_path(collection)
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            _logger.error(f"STORE_READ_ERROR | collection:{collection} | error:{e}")
            raise StoreError(f"Failed to read {collection}") from e

    def _flush(self, collection: str, records: dict[str, dict[str, Any]]) -> None:
        """Write a collection back to its file."""
        path = self._collection_path(collection)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, default=str)
            tmp_path.replace(path)
        except OSError as e:
            _logger.error(f"STORE_WRITE_ERROR | collection:{collection} | error:{e}")
            raise StoreError(f"Failed to write {collection}") from e

    def _write_blob(self, collection: str, key: str, data: bytes | None) -> None:
        path = self._blob_path(collection, key)
        try:
            if data is None:
                path.unlink(missing_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
        except OSError as e:
            _logger.error(f"STORE_BLOB_ERROR | collection:{collection} | id:{key} | error:{e}")
            raise StoreError(f"Failed to write blob for {collection}/{key}") from e

    def _read_blob(self, collection: str, key: str) -> bytes | None:
        path = self._blob_path(collection, key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            _logger.error(f"STORE_BLOB_ERROR | collection:{collection} | id:{key} | error:{e}")
            raise StoreError(f"Failed to read blob for {collection}/{key}") from e

    def _hydrate(self, model: type[M], record: dict[str, Any]) -> M:
        instance = model.model_validate(record)
        if model.blob_field:
            setattr(instance, model.blob_field, self._read_blob(model.collection, instance.id))
        return instance

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def get(self, model: type[M], key: str) -> M | None:
        """Get an entity by id, or None."""
        record = self._load(model.collection).get(key)
        if record is None:
            return None
        return self._hydrate(model, record)

    def require(self, model: type[M], key: str) -> M:
        """Get an entity by id.

        Raises:
            NotFoundError: If no entity has this id.
        """
        instance = self.get(model, key)
        if instance is None:
            raise NotFoundError(model.__name__, key)
        return instance

    def put(self, instance: StoredModel) -> None:
        """Insert or replace an entity."""
        collection = type(instance).collection
        records = self._load(collection)
        records[instance.id] = instance.model_dump(mode="json")
        blob_field = type(instance).blob_field
        if blob_field:
            self._write_blob(collection, instance.id, getattr(instance, blob_field))
        self._flush(collection, records)
        _logger.debug(f"STORE_PUT | collection:{collection} | id:{instance.id}")

    def find(self, model: type[M], **filters: Any) -> list[M]:
        """Get all entities whose fields equal the given values."""
        wanted = {name: _plain(value) for name, value in filters.items()}
        return [
            self._hydrate(model, record)
            for record in self._load(model.collection).values()
            if all(record.get(name) == value for name, value in wanted.items())
        ]

    def find_one(self, model: type[M], **filters: Any) -> M | None:
        """Get the first entity matching the filters, or None."""
        matches = self.find(model, **filters)
        return matches[0] if matches else None

    def delete(self, model: type[M], key: str) -> bool:
        """Delete an entity and everything that belongs to it.

        Returns:
            True if the entity existed.
        """
        return self._delete_record(model.collection, key)

    def _delete_record(self, collection: str, key: str) -> bool:
        records = self._load(collection)
        if key not in records:
            return False

        del records[key]
        self._write_blob(collection, key, None)
        self._flush(collection, records)
        _logger.info(f"STORE_DELETE | collection:{collection} | id:{key}")

        for child_collection, fk in CASCADE_DELETE.get(collection, []):
            child_keys = [
                child_key
                for child_key, record in self._load(child_collection).items()
                if record.get(fk) == key
            ]
            for child_key in child_keys:
                self._delete_record(child_collection, child_key)
            if child_keys:
                _logger.info(
                    f"STORE_CASCADE | parent:{collection}/{key} | "
                    f"collection:{child_collection} | removed:{len(child_keys)}"
                )

        for ref_collection, fk in CASCADE_SET_NULL.get(collection, []):
            refs = self._load(ref_collection)
            changed = False
            for record in refs.values():
                if record.get(fk) == key:
                    record[fk] = None
                    changed = True
            if changed:
                self._flush(ref_collection, refs)

        return True

"""
Document store abstraction standing in for the studio's Firestore database.

Documents are plain JSON-compatible dicts grouped into named collections
and addressed by string id. Two backends are provided:

* ``InMemoryDocumentStore`` for tests and embedding in a running process.
* ``JsonFileDocumentStore`` persisting every collection to one JSON file,
  used by the command line.

Backends raise ``StoreUnavailable`` when the underlying storage cannot be
reached. A missing document is not an error and reads as ``None``.
"""

import copy
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from studio_booking.errors import StoreUnavailable
from studio_booking.logging_context import get_request_logger

logger = get_request_logger(__name__)

Document = dict[str, Any]


class DocumentStore(ABC):
    """Single-document read/replace access to named collections."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return a copy of the document, or None if it does not exist."""

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: Document) -> None:
        """Create or fully replace a document."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""

    @abstractmethod
    def list_collection(self, collection: str) -> dict[str, Document]:
        """Return copies of all documents in a collection keyed by id."""

    def query(self, collection: str, **equals: Any) -> list[Document]:
        """Return documents whose fields equal every given keyword value."""
        return [
            doc for doc in self.list_collection(collection).values()
            if all(doc.get(key) == value for key, value in equals.items())
        ]


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store. Reads and writes copy, so callers never share state."""

    def __init__(self, initial: Optional[dict[str, dict[str, Document]]] = None) -> None:
        self._collections: dict[str, dict[str, Document]] = copy.deepcopy(initial or {})

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        doc = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def delete(self, collection: str, doc_id: str) -> bool:
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            return False
        del docs[doc_id]
        return True

    def list_collection(self, collection: str) -> dict[str, Document]:
        return copy.deepcopy(self._collections.get(collection, {}))

    def snapshot(self) -> dict[str, dict[str, Document]]:
        """Return a deep copy of every collection."""
        return copy.deepcopy(self._collections)


class JsonFileDocumentStore(DocumentStore):
    """
    Store persisting all collections to a single JSON file.

    The file is re-read on every operation so edits made by another
    process are picked up. Writes go to a temporary file that replaces
    the existing one, so a crashed write never leaves a truncated file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, dict[str, Document]]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailable(f"Cannot read document store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreUnavailable(f"Document store {self.path} is not a JSON object")
        return data

    def _save(self, data: dict[str, dict[str, Document]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        except OSError as exc:
            raise StoreUnavailable(f"Cannot write document store {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True, default=str)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreUnavailable(f"Cannot write document store {self.path}: {exc}") from exc
        logger.debug("Document store written: %s", self.path)

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        return self._load().get(collection, {}).get(doc_id)

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        all_data = self._load()
        all_data.setdefault(collection, {})[doc_id] = data
        self._save(all_data)

    def delete(self, collection: str, doc_id: str) -> bool:
        all_data = self._load()
        docs = all_data.get(collection, {})
        if doc_id not in docs:
            return False
        del docs[doc_id]
        self._save(all_data)
        return True

    def list_collection(self, collection: str) -> dict[str, Document]:
        return self._load().get(collection, {})

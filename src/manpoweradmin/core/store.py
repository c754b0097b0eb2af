from __future__ import annotations

import copy
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore
from google.oauth2 import service_account

from manpoweradmin.config import Settings
from manpoweradmin.services.format_service import parse_timestamp

log = logging.getLogger("store")

ORDER_FIELD = "submittedAt"

_BACKEND_ERRORS = (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


class StoreError(Exception):
    """Remote read/write/delete failure; the message carries the underlying cause."""


class DocumentStore(Protocol):
    """Description: Operations the review screens need from the document database.
    Layer: L0
    Input: collection name + document id + field map
    Output: raw documents as dicts with an `id` key
    """

    def list_ordered(self, collection: str, order_by: str = ORDER_FIELD) -> List[Dict[str, Any]]: ...

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None: ...

    def delete(self, collection: str, doc_id: str) -> None: ...


class FirestoreDocumentStore:
    """Description: DocumentStore backed by Google Cloud Firestore.
    Layer: L0
    Input: Settings (project id + optional service-account file)
    Output: ordered reads, field updates and deletes against Firestore
    """

    def __init__(self, settings: Settings, client: Optional[firestore.Client] = None) -> None:
        self.s = settings
        self._client = client
        self._lock = threading.Lock()

    def client(self) -> firestore.Client:
        with self._lock:
            if self._client is None:
                try:
                    credentials = None
                    if self.s.firestore_credentials_file:
                        credentials = service_account.Credentials.from_service_account_file(
                            self.s.firestore_credentials_file
                        )
                    self._client = firestore.Client(project=self.s.firestore_project, credentials=credentials)
                except (*_BACKEND_ERRORS, OSError, ValueError) as e:
                    # missing/malformed service-account file or no default credentials
                    log.error("Firestore client setup failed: %s", e)
                    raise StoreError(f"Firestore client setup failed: {e}") from e
            return self._client

    def list_ordered(self, collection: str, order_by: str = ORDER_FIELD) -> List[Dict[str, Any]]:
        try:
            query = self.client().collection(collection).order_by(order_by, direction=firestore.Query.DESCENDING)
            return [{**(snap.to_dict() or {}), "id": snap.id} for snap in query.stream()]
        except _BACKEND_ERRORS as e:
            log.error("Firestore read failed for %s: %s", collection, e)
            raise StoreError(str(e)) from e

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        try:
            self.client().collection(collection).document(doc_id).update(fields)
        except _BACKEND_ERRORS as e:
            log.error("Firestore update failed for %s/%s: %s", collection, doc_id, e)
            raise StoreError(str(e)) from e

    def delete(self, collection: str, doc_id: str) -> None:
        try:
            self.client().collection(collection).document(doc_id).delete()
        except _BACKEND_ERRORS as e:
            log.error("Firestore delete failed for %s/%s: %s", collection, doc_id, e)
            raise StoreError(str(e)) from e


def _order_key(value: Any) -> Optional[datetime]:
    dt = parse_timestamp(value)
    if dt is not None and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class InMemoryDocumentStore:
    """Description: Process-local DocumentStore for demos and tests.
    Layer: L0
    Input: {collection: [document dicts with `id`]} seed
    Output: same semantics as Firestore for the operations used here
    """

    def __init__(self, seed: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> None:
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        for name, docs in (seed or {}).items():
            for doc in docs:
                self.add(name, doc)

    @classmethod
    def from_json_file(cls, path: str) -> "InMemoryDocumentStore":
        return cls(json.loads(Path(path).read_text(encoding="utf-8")))

    def add(self, collection: str, doc: Dict[str, Any]) -> str:
        data = copy.deepcopy(doc)
        doc_id = str(data.pop("id", None) or f"doc{len(self._collections.get(collection, {})) + 1}")
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = data
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return None if data is None else {**copy.deepcopy(data), "id": doc_id}

    def list_ordered(self, collection: str, order_by: str = ORDER_FIELD) -> List[Dict[str, Any]]:
        with self._lock:
            docs = self._collections.get(collection, {})
            # Firestore drops documents that lack the ordering field.
            keyed = [(_order_key(d.get(order_by)), doc_id, d) for doc_id, d in docs.items() if order_by in d]
        keyed = [k for k in keyed if k[0] is not None]
        keyed.sort(key=lambda k: k[0], reverse=True)
        return [{**copy.deepcopy(d), "id": doc_id} for _, doc_id, d in keyed]

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            doc = self._collections.get(collection, {}).get(doc_id)
            if doc is None:
                raise StoreError(f"No document to update: {collection}/{doc_id}")
            doc.update(copy.deepcopy(fields))

    def delete(self, collection: str, doc_id: str) -> None:
        # Firestore deletes are idempotent.
        with self._lock:
            self._collections.get(collection, {}).pop(doc_id, None)


def build_store(settings: Settings) -> DocumentStore:
    """
    Description: Select the configured store backend.
    Layer: L0
    Input: Settings
    Output: DocumentStore
    """
    if settings.store_backend == "memory":
        if settings.seed_file:
            log.info("Using in-memory store seeded from %s", settings.seed_file)
            return InMemoryDocumentStore.from_json_file(settings.seed_file)
        log.info("Using empty in-memory store")
        return InMemoryDocumentStore()
    log.info("Using Firestore store (project=%s)", settings.firestore_project or "<default>")
    return FirestoreDocumentStore(settings)

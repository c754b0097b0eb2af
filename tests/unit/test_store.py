import json

import pytest
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from manpoweradmin.config import Settings
from manpoweradmin.core.store import FirestoreDocumentStore, InMemoryDocumentStore, StoreError, build_store


def test_memory_store_orders_newest_first_and_drops_unordered_docs() -> None:
    store = InMemoryDocumentStore(
        {
            "c": [
                {"id": "old", "submittedAt": "2024-01-01T00:00:00Z"},
                {"id": "new", "submittedAt": {"seconds": 1735689600}},
                {"id": "mid", "submittedAt": "2024-06-01"},
                {"id": "none"},
            ]
        }
    )
    assert [d["id"] for d in store.list_ordered("c")] == ["new", "mid", "old"]
    assert store.list_ordered("missing") == []


def test_memory_store_update_and_delete() -> None:
    store = InMemoryDocumentStore({"c": [{"id": "a", "submittedAt": "2024-01-01", "status": "pending"}]})
    store.update("c", "a", {"status": "approved"})
    assert store.get("c", "a")["status"] == "approved"
    with pytest.raises(StoreError):
        store.update("c", "ghost", {"status": "approved"})
    store.delete("c", "a")
    assert store.get("c", "a") is None


def test_memory_store_returns_copies() -> None:
    store = InMemoryDocumentStore({"c": [{"id": "a", "submittedAt": "2024-01-01", "tags": ["x"]}]})
    docs = store.list_ordered("c")
    docs[0]["tags"].append("y")
    assert store.get("c", "a")["tags"] == ["x"]


def test_build_store_selects_backend(tmp_path) -> None:
    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps({"manpowerSubmissions": [{"id": "s1", "submittedAt": "2024-01-01"}]}), encoding="utf-8")

    store = build_store(Settings(store_backend="memory", seed_file=str(seed)))
    assert isinstance(store, InMemoryDocumentStore)
    assert [d["id"] for d in store.list_ordered("manpowerSubmissions")] == ["s1"]

    assert isinstance(build_store(Settings(store_backend="firestore", firestore_project="demo")), FirestoreDocumentStore)


def test_demo_seed_file_loads() -> None:
    store = InMemoryDocumentStore.from_json_file("data/demo_seed.json")
    assert len(store.list_ordered("manpowerSubmissions")) == 2
    assert len(store.list_ordered("manpowerServicePayments")) == 2


# ----------------------------------------------------------- firestore wiring
class _Snap:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return self._data


class _FakeFirestore:
    """Records the calls the store makes; raises `error` from every terminal call when set."""

    def __init__(self, snaps=(), error=None):
        self.snaps = list(snaps)
        self.error = error
        self.calls = []

    def collection(self, name):
        self.calls.append(("collection", name))
        return self

    def order_by(self, field, direction=None):
        self.calls.append(("order_by", field, direction))
        return self

    def document(self, doc_id):
        self.calls.append(("document", doc_id))
        return self

    def stream(self):
        if self.error:
            raise self.error
        return iter(self.snaps)

    def update(self, fields):
        if self.error:
            raise self.error
        self.calls.append(("update", fields))

    def delete(self):
        if self.error:
            raise self.error
        self.calls.append(("delete",))


def test_firestore_list_orders_descending_by_submitted_at() -> None:
    fake = _FakeFirestore([_Snap("b", {"status": "pending"}), _Snap("a", None)])
    store = FirestoreDocumentStore(Settings(), client=fake)
    assert store.list_ordered("manpowerSubmissions") == [{"status": "pending", "id": "b"}, {"id": "a"}]
    assert ("collection", "manpowerSubmissions") in fake.calls
    assert ("order_by", "submittedAt", firestore.Query.DESCENDING) in fake.calls


def test_firestore_update_and_delete_target_the_document() -> None:
    fake = _FakeFirestore()
    store = FirestoreDocumentStore(Settings(), client=fake)
    store.update("manpowerServicePayments", "p1", {"status": "completed", "verified": True})
    store.delete("manpowerSubmissions", "s1")
    assert fake.calls == [
        ("collection", "manpowerServicePayments"),
        ("document", "p1"),
        ("update", {"status": "completed", "verified": True}),
        ("collection", "manpowerSubmissions"),
        ("document", "s1"),
        ("delete",),
    ]


@pytest.mark.parametrize(
    "error",
    [google_exceptions.PermissionDenied("Missing or insufficient permissions."), google_exceptions.NotFound("gone")],
)
def test_firestore_backend_errors_become_store_errors(error) -> None:
    store = FirestoreDocumentStore(Settings(), client=_FakeFirestore(error=error))
    with pytest.raises(StoreError) as exc:
        store.list_ordered("manpowerSubmissions")
    assert isinstance(exc.value.__cause__, google_exceptions.GoogleAPIError)
    with pytest.raises(StoreError):
        store.update("manpowerSubmissions", "s1", {"status": "approved"})
    with pytest.raises(StoreError):
        store.delete("manpowerSubmissions", "s1")


def test_firestore_missing_credentials_file_is_a_store_error(tmp_path) -> None:
    store = FirestoreDocumentStore(Settings(firestore_credentials_file=str(tmp_path / "missing.json")))
    with pytest.raises(StoreError, match="client setup failed"):
        store.list_ordered("manpowerSubmissions")


def test_firestore_malformed_credentials_file_is_a_store_error(tmp_path) -> None:
    bad = tmp_path / "sa.json"
    bad.write_text("{not json", encoding="utf-8")
    store = FirestoreDocumentStore(Settings(firestore_credentials_file=str(bad)))
    with pytest.raises(StoreError):
        store.update("manpowerSubmissions", "s1", {"status": "approved"})

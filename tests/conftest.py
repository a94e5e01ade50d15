import os

# Variables d'environnement de test, posées avant l'import de tourx.config
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-secret-for-tourx-tokens-0123456789")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from tourx.app_setup.factory import create_app
from tourx.auth.tokens import issue_token
from tourx.errors import StoreUnavailable
from tourx.store import documents
from tourx.store.records import Collection

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class FakeDocumentStore:
    """
    Document store en mémoire: mêmes signatures que tourx.store.documents,
    même validation (build_record / validate_changes / parse_record), lignes stockées
    au format colonne comme dans Supabase.
    """

    def __init__(self):
        self.rows: Dict[Collection, List[Dict[str, Any]]] = {c: [] for c in Collection}
        self._failures = set()

    def fail_on(self, op: str, collection: Optional[Collection] = None):
        self._failures.add((op, Collection(collection) if collection else None))

    def _check(self, op: str, collection: Collection):
        if (op, None) in self._failures or (op, Collection(collection)) in self._failures:
            raise StoreUnavailable(f"Document store indisponible ({op} {Collection(collection).value})")

    @staticmethod
    def _matches(row: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        for column, value in (filters or {}).items():
            expected = documents._jsonable(value)
            if isinstance(expected, list):
                if row.get(column) not in expected:
                    return False
            elif row.get(column) != expected:
                return False
        return True

    def recover(self):
        self._failures.clear()

    def seed(self, collection: Collection, data: Dict[str, Any]):
        return self.insert_one(collection, data)

    def insert_one(self, collection, data):
        collection = Collection(collection)
        self._check("insert_one", collection)
        record = data if isinstance(data, documents.Record) else documents.build_record(collection, data)
        row = documents.to_row(record)
        row["id"] = str(uuid.uuid4())
        if collection == Collection.PAYMENTS:
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.rows[collection].append(row)
        return documents.parse_record(collection, dict(row))

    def find_many(self, collection, filters=None, *, order_by=None, desc=False, limit=None):
        collection = Collection(collection)
        self._check("find_many", collection)
        rows = [dict(r) for r in self.rows[collection] if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=desc)
        if limit:
            rows = rows[:limit]
        records = (documents.parse_record(collection, r) for r in rows)
        return [r for r in records if r is not None]

    def find_one(self, collection, **filters):
        rows = self.find_many(collection, filters, limit=1)
        return rows[0] if rows else None

    def find_by_id(self, collection, doc_id):
        return self.find_one(collection, id=doc_id)

    def update_by_id(self, collection, doc_id, changes, expected=None):
        collection = Collection(collection)
        changes = documents.validate_changes(collection, changes)
        self._check("update_by_id", collection)
        for row in self.rows[collection]:
            if row["id"] == doc_id and self._matches(row, expected):
                row.update(changes)
                return documents.parse_record(collection, dict(row))
        return None

    def delete_by_id(self, collection, doc_id):
        return self.delete_by_ids(collection, [doc_id])

    def delete_by_ids(self, collection, ids):
        collection = Collection(collection)
        self._check("delete_by_ids", collection)
        wanted = {str(i) for i in ids or []}
        before = len(self.rows[collection])
        self.rows[collection] = [r for r in self.rows[collection] if r["id"] not in wanted]
        return before - len(self.rows[collection])

    def count(self, collection, **filters):
        collection = Collection(collection)
        self._check("count", collection)
        return sum(1 for r in self.rows[collection] if self._matches(r, filters))

    def column_values(self, collection, column, **filters):
        collection = Collection(collection)
        self._check("column_values", collection)
        return [r[column] for r in self.rows[collection] if self._matches(r, filters) and r.get(column) is not None]

    def all(self, collection) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.rows[Collection(collection)]]


@pytest.fixture
def store(monkeypatch) -> FakeDocumentStore:
    """Remplace les opérations du document store par la version en mémoire."""
    fake = FakeDocumentStore()
    for name in (
        "insert_one", "find_many", "find_one", "find_by_id", "update_by_id",
        "delete_by_id", "delete_by_ids", "count", "column_values",
    ):
        monkeypatch.setattr(documents, name, getattr(fake, name))
    return fake


@pytest.fixture(scope="session")
def app():
    return create_app()

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(email: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(email)}"}

@pytest.fixture
def customer(store) -> Dict[str, Any]:
    user = store.seed(Collection.USERS, {"email": "c@x.com", "name": "Client"})
    return {"user": user, "email": "c@x.com", "headers": auth_headers("c@x.com")}

@pytest.fixture
def admin(store) -> Dict[str, Any]:
    user = store.seed(Collection.USERS, {"email": "admin@tourx.com", "role": "admin"})
    return {"user": user, "email": "admin@tourx.com", "headers": auth_headers("admin@tourx.com")}

@pytest.fixture
def guide(store) -> Dict[str, Any]:
    user = store.seed(Collection.USERS, {"email": "guide@tourx.com", "role": "guide"})
    return {"user": user, "email": "guide@tourx.com", "headers": auth_headers("guide@tourx.com")}


class FakeIntents:
    """Remplace stripe.PaymentIntent.create et garde la trace des appels."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        n = len(self.calls)
        return {"id": f"pi_test_{n}", "client_secret": f"pi_test_{n}_secret_abc", "amount": kwargs["amount"]}

@pytest.fixture
def stripe_intents(monkeypatch) -> FakeIntents:
    import stripe

    fake = FakeIntents()
    monkeypatch.setattr(stripe.PaymentIntent, "create", fake.create)
    return fake

@pytest.fixture
def token_headers():
    """Fabrique d'en-têtes Bearer pour un email arbitraire."""
    return auth_headers

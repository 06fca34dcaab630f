"""
Shared fixtures: an in-memory stand-in for the RecordStore gateway and
ready-made sessions/notifiers. No test talks to Supabase.
"""

import pytest

from admin_console.core import registry
from admin_console.core.errors import GatewayError
from admin_console.core.notifications import NotificationCenter
from admin_console.core.session import ConsoleSession


class FakeStore:
    """Implements the RecordStore coroutine API over plain dicts and records every call."""

    def __init__(self, tables=None, total_counts=None, echo=True):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.total_counts = total_counts or {}
        self.echo = echo
        self.failures = {}  # action -> backend message
        self.calls = []
        self._next_id = 1

    def fail(self, action, message="network error"):
        self.failures[action] = message

    def _call(self, action, table):
        self.calls.append((action, table))
        if action in self.failures:
            raise GatewayError(self.failures[action])

    async def select_ordered(self, table, columns="*", filters=None, order_by="created_at", desc=True):
        self._call("select", table)
        rows = [
            dict(r) for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=desc)
        return rows

    async def select_by_id(self, table, record_id, columns="*"):
        self._call("select", table)
        return next((dict(r) for r in self.tables.get(table, []) if r["id"] == record_id), None)

    async def count(self, table, filters=None):
        self._call("count", table)
        if table in self.total_counts:
            return self.total_counts[table]
        return len(self.tables.get(table, []))

    async def update_by_id(self, table, record_id, fields):
        self._call("update", table)
        for row in self.tables.get(table, []):
            if row["id"] == record_id:
                row.update(fields)
                return dict(row) if self.echo else None
        return None

    async def insert_returning(self, table, row):
        self._call("insert", table)
        created = {"id": f"{table}-{self._next_id}", **row}
        self._next_id += 1
        self.tables.setdefault(table, []).append(created)
        return dict(created)

    @property
    def writes(self):
        return [c for c in self.calls if c[0] in ("update", "insert")]


class GatedStore(FakeStore):
    """FakeStore whose writes wait on `gate` (when set) so tests can act while a write is pending."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.gate = None

    async def _wait(self):
        if self.gate is not None:
            await self.gate.wait()

    async def update_by_id(self, table, record_id, fields):
        await self._wait()
        return await super().update_by_id(table, record_id, fields)

    async def insert_returning(self, table, row):
        await self._wait()
        return await super().insert_returning(table, row)


PROFILES = [
    {
        "id": "u1", "email": "ana@example.com", "full_name": "Ana Souza", "whatsapp": "11999887766",
        "payment_status": "pendente", "is_admin": False, "created_at": "2024-03-01T10:00:00+00:00",
    },
    {
        "id": "u2", "email": "bruno@example.com", "full_name": "Bruno Lima", "whatsapp": None,
        "payment_status": "aprovado", "is_admin": True, "created_at": "2024-02-01T10:00:00+00:00",
    },
    {
        "id": "u3", "email": "carla@example.com", "full_name": None, "whatsapp": None,
        "payment_status": "pendente", "is_admin": False, "created_at": "2024-01-01T10:00:00+00:00",
    },
]

CUSTOMERS = [
    {"id": "c1", "name": "Acme Ltda", "status": "ativo", "email": "contato@acme.com", "phone": "1133334444"},
    {"id": "c2", "name": "Beta SA", "status": "inativo", "email": None, "phone": None},
]

DEALS = [
    {
        "id": "d1", "customer_id": "c1", "title": "Renovação anual", "value": 12000, "status": "proposta",
        "expected_close_date": "2024-06-30", "notes": None,
        "created_at": "2024-03-05T10:00:00+00:00", "updated_at": "2024-03-05T10:00:00+00:00",
        "crm_customers": {"name": "Acme Ltda", "email": "contato@acme.com", "phone": "1133334444"},
    },
    {
        "id": "d2", "customer_id": "c1", "title": "Consultoria", "value": None, "status": "prospeccao",
        "expected_close_date": None, "notes": "primeiro contato",
        "created_at": "2024-03-01T10:00:00+00:00", "updated_at": "2024-03-01T10:00:00+00:00",
        "crm_customers": {"name": "Acme Ltda", "email": "contato@acme.com", "phone": "1133334444"},
    },
]


@pytest.fixture
def store():
    return FakeStore(
        tables={"profiles": PROFILES, "crm_customers": CUSTOMERS, "crm_deals": DEALS},
        total_counts={"profiles": 5},
    )


@pytest.fixture
def admin_session():
    return ConsoleSession(user_id="admin-1", email="admin@admin.com", is_admin=True)


@pytest.fixture
def notifier():
    return NotificationCenter(max_size=20)


@pytest.fixture(autouse=True)
def clean_registry():
    registry.clear()
    yield
    registry.clear()


@pytest.fixture
def gated_store():
    return GatedStore(
        tables={"profiles": PROFILES, "crm_customers": CUSTOMERS, "crm_deals": DEALS},
        total_counts={"profiles": 5},
    )

"""
conftest.py — Shared test fixtures for the inquiry assignment service

Provides an in-memory SQLite database, FastAPI TestClient with auth
overrides, factory fixtures for the core models (User, Customer, Inquiry,
InquiryItem), and an in-memory ItemStore plus record builders for the
board engine tests.

Business Rules:
- All tests run against an isolated in-memory DB (no real data at risk)
- Auth is overridden so tests don't need sessions or agent keys
- Each test function gets fresh tables and an empty memory cache

Called by: all test files via pytest autodiscovery
Depends on: app.models (Base), app.database (get_db), app.dependencies
"""

import os

os.environ["TESTING"] = "1"  # Must be set before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CACHE_BACKEND", "memory")

from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.connectors.item_store import ItemStore
from app.models import Base, Customer, Inquiry, InquiryItem, User
from app.schemas.items import CustomerOut, InquiryOut, InquiryRef, ItemOut, UserOut

# ── In-memory SQLite engine ──────────────────────────────────────────

TEST_DB_URL = "sqlite://"  # in-memory, fresh per session

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default; turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _reset_cache():
    """Cached analytics must not leak between tests."""
    from app.cache.backend import reset_memory_cache

    reset_memory_cache()
    yield
    reset_memory_cache()


def _make_user(db: Session, email: str, name: str, role: str, is_active: bool = True) -> User:
    user = User(
        email=email,
        name=name,
        role=role,
        is_active=is_active,
        created_at=datetime.now(timezone.utc),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def vpp_user(db_session: Session) -> User:
    """A VPP user: can assign, and can be assigned to."""
    return _make_user(db_session, "vpp@inquiries.local", "Vesna Petrovic", "VPP")


@pytest.fixture()
def vp_user(db_session: Session) -> User:
    """A VP user: receives items for cost calculation."""
    return _make_user(db_session, "vp@inquiries.local", "Marko Kovac", "VP")


@pytest.fixture()
def second_vp(db_session: Session) -> User:
    return _make_user(db_session, "vp2@inquiries.local", "Ana Horvat", "VP")


@pytest.fixture()
def inactive_vp(db_session: Session) -> User:
    return _make_user(db_session, "gone@inquiries.local", "Former VP", "VP", is_active=False)


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    """An admin-role user for privileged operations."""
    return _make_user(db_session, "admin@inquiries.local", "Test Admin", "ADMIN")


@pytest.fixture()
def sales_user(db_session: Session) -> User:
    """A sales-role user (may read, may not assign)."""
    return _make_user(db_session, "sales@inquiries.local", "Test Sales", "SALES")


@pytest.fixture()
def test_customer(db_session: Session) -> Customer:
    customer = Customer(name="Acme Manufacturing", email="buyer@acme.example", is_active=True)
    db_session.add(customer)
    db_session.commit()
    db_session.refresh(customer)
    return customer


@pytest.fixture()
def test_inquiry(db_session: Session, test_customer: Customer, sales_user: User) -> Inquiry:
    """A SUBMITTED HIGH-priority inquiry with two PENDING items."""
    inquiry = Inquiry(
        title="Q3 Order",
        status="SUBMITTED",
        priority="HIGH",
        customer_id=test_customer.id,
        created_by_id=sales_user.id,
        created_at=datetime.now(timezone.utc),
    )
    inquiry.items.append(InquiryItem(name="Steel Bracket", quantity=500, unit="pcs", status="PENDING"))
    inquiry.items.append(
        InquiryItem(name="Hinge Plate", description="zinc plated", quantity=200, unit="pcs", status="PENDING")
    )
    db_session.add(inquiry)
    db_session.commit()
    db_session.refresh(inquiry)
    return inquiry


@pytest.fixture()
def urgent_inquiry(db_session: Session, sales_user: User) -> Inquiry:
    """A second customer's URGENT inquiry with one PENDING item."""
    customer = Customer(name="Nordic Steelworks", is_active=True)
    db_session.add(customer)
    db_session.flush()
    inquiry = Inquiry(
        title="Frame Assembly",
        status="SUBMITTED",
        priority="URGENT",
        customer_id=customer.id,
        created_by_id=sales_user.id,
        created_at=datetime.now(timezone.utc),
    )
    inquiry.items.append(InquiryItem(name="Welded Frame", quantity=12, unit="pcs", status="PENDING"))
    db_session.add(inquiry)
    db_session.commit()
    db_session.refresh(inquiry)
    return inquiry


@pytest.fixture()
def item_ids(test_inquiry: Inquiry) -> list[int]:
    return [item.id for item in test_inquiry.items]


@contextmanager
def _client_as(db_session: Session, user: User):
    from app.database import get_db
    from app.dependencies import require_user
    from app.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[require_user] = lambda: user

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session: Session, vpp_user: User) -> TestClient:
    """FastAPI TestClient authenticated as the VPP user.

    Overrides get_db to use the test session and require_user to skip
    session/agent-key auth. require_assigner and require_workload_viewer
    still run their role checks against that user.
    """
    with _client_as(db_session, vpp_user) as c:
        yield c


@pytest.fixture()
def vp_client(db_session: Session, vp_user: User) -> TestClient:
    with _client_as(db_session, vp_user) as c:
        yield c


@pytest.fixture()
def sales_client(db_session: Session, sales_user: User) -> TestClient:
    with _client_as(db_session, sales_user) as c:
        yield c


@pytest.fixture()
def anon_client(db_session: Session) -> TestClient:
    """TestClient with the real require_user (no session, no agent key)."""
    from app.database import get_db
    from app.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Board engine builders ────────────────────────────────────────────


def build_item(
    id,
    inquiry_id="q1",
    name="Item",
    status="PENDING",
    assigned_to_id=None,
    priority="MEDIUM",
    title="Inquiry",
    customer_id="c1",
    customer_name="Customer",
    description=None,
) -> ItemOut:
    return ItemOut(
        id=id,
        inquiry_id=inquiry_id,
        name=name,
        description=description,
        status=status,
        assigned_to_id=assigned_to_id,
        inquiry=InquiryRef(
            id=inquiry_id,
            title=title,
            priority=priority,
            customer_id=customer_id,
            customer=CustomerOut(id=customer_id, name=customer_name),
        ),
    )


@pytest.fixture()
def make_item():
    """Factory for ItemOut records with an embedded inquiry and customer."""
    return build_item


@pytest.fixture()
def make_user():
    def _make(id, name=None, role="VP"):
        return UserOut(id=id, name=name or f"User {id}", role=role)

    return _make


class FakeItemStore(ItemStore):
    """In-memory ItemStore that records every call.

    Set `failures[method_name] = exc` to make that method raise.
    Assign/unassign update the stored items, so a following list_items
    returns the post-mutation state like the real API would.
    """

    def __init__(self, items=(), users=(), customers=(), inquiries=()):
        self.items = list(items)
        self.users = list(users)
        self.customers = list(customers)
        self.inquiries = list(inquiries)
        self.calls: list[tuple] = []
        self.failures: dict = {}

    def _call(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def calls_to(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    async def list_items(self, limit=200):
        self._call("list_items", limit)
        return list(self.items)

    async def list_users(self, roles=(), active_only=True):
        self._call("list_users", tuple(roles), active_only)
        return list(self.users)

    async def list_customers(self, active_only=True, limit=100):
        self._call("list_customers", active_only, limit)
        return list(self.customers)

    async def list_inquiries(self, limit=100):
        self._call("list_inquiries", limit)
        return list(self.inquiries)

    async def assign_items(self, item_ids, assignee_id):
        self._call("assign_items", list(item_ids), assignee_id)
        self._update(item_ids, {"assigned_to_id": assignee_id, "status": "ASSIGNED"})
        return {"success": True, "updated_count": len(item_ids)}

    async def unassign_items(self, item_ids):
        self._call("unassign_items", list(item_ids))
        self._update(item_ids, {"assigned_to_id": None, "status": "PENDING"})
        return {"success": True, "updated_count": len(item_ids)}

    def _update(self, item_ids, changes: dict) -> None:
        wanted = {str(i) for i in item_ids}
        self.items = [
            item.model_copy(update=changes) if str(item.id) in wanted else item for item in self.items
        ]


@pytest.fixture()
def fake_store_cls():
    return FakeItemStore


@pytest.fixture()
def sample_inquiry_out():
    return InquiryOut(id="q1", title="Q3 Order", priority="HIGH", customer_id="c1", item_count=1)

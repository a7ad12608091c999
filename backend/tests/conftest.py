"""
Pytest configuration and fixtures for storefront tests.
"""
import asyncio
import itertools

import pytest
from flask_jwt_extended import create_access_token

from storefront import create_app
from storefront.application.checkout.collaborators import (
    CatalogProduct,
    CatalogVariant,
    OrderReceipt,
)
from storefront.domain.risk import CourierHistoryRecord, CourierStats
from storefront.extensions import db


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(app):
    token = create_access_token(identity="admin-1", additional_claims={"role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_headers(app):
    token = create_access_token(identity="staff-1", additional_claims={"role": "staff"})
    return {"Authorization": f"Bearer {token}"}


# -------------------------------------------------
# Collaborator fakes
# -------------------------------------------------
class FakeSubmitter:
    """Returns queued outcomes in order; an Exception outcome is raised."""

    def __init__(self, *outcomes, gate=None):
        self.outcomes = list(outcomes)
        self.requests = []
        self.gate = gate
        self._numbers = itertools.count(1001)

    async def submit(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else None
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            number = next(self._numbers)
            return OrderReceipt(order_id=f"order-{number}", order_number=str(number))
        return outcome


class FakeDraftStore:
    def __init__(self):
        self.rows = {}
        self.writes = []
        self.fail_next = 0
        self._ids = itertools.count(1)

    def seed(self, session_id, snapshot=None, converted=False):
        draft_id = f"draft-{next(self._ids)}"
        self.rows[draft_id] = {
            "session_id": session_id,
            "snapshot": snapshot or {},
            "converted": converted,
        }
        return draft_id

    async def find_open(self, session_id):
        for draft_id, row in self.rows.items():
            if row["session_id"] == session_id and not row["converted"]:
                return draft_id
        return None

    async def create(self, session_id, snapshot):
        if self.fail_next:
            self.fail_next -= 1
            raise RuntimeError("database unavailable")
        draft_id = self.seed(session_id, snapshot)
        self.writes.append(("create", draft_id, snapshot))
        return draft_id

    async def update(self, draft_id, snapshot):
        self.rows[draft_id]["snapshot"] = snapshot
        self.writes.append(("update", draft_id, snapshot))

    async def mark_converted(self, draft_id):
        self.rows[draft_id]["converted"] = True
        self.writes.append(("convert", draft_id, None))


class FakeCatalog:
    def __init__(self, *products):
        self.products = {p.id: p for p in products}
        self.requested = []

    async def get_products(self, product_ids):
        self.requested.append(list(product_ids))
        return [self.products[i] for i in product_ids if i in self.products]


class FakeCourierSource:
    def __init__(self, records=None, error=None, delay=0.01):
        self.records = records or {}
        self.error = error
        self.delay = delay
        self.calls = []

    async def fetch(self, phone):
        self.calls.append(phone)
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.records.get(phone)


def courier_record(phone, total, success, cancelled, ratio):
    return CourierHistoryRecord(
        phone=phone,
        summary=CourierStats(
            total_parcels=total,
            successful_parcels=success,
            cancelled_parcels=cancelled,
            success_ratio=ratio,
        ),
    )


@pytest.fixture
def serum():
    """One product, one active variant priced 1000."""
    return CatalogProduct(
        id="p-serum",
        name="Vitamin C Serum",
        price=1000,
        variants=(
            CatalogVariant(id="v-30", name="30ml", price=1000, stock=10, sort_order=1),
            CatalogVariant(id="v-old", name="Old pack", price=800, is_active=False, sort_order=0),
        ),
    )


@pytest.fixture
def cream():
    """Two active variants."""
    return CatalogProduct(
        id="p-cream",
        name="Night Cream",
        price=500,
        variants=(
            CatalogVariant(id="v-small", name="Small", price=500, sort_order=1),
            CatalogVariant(id="v-large", name="Large", price=900, sort_order=2),
        ),
    )


@pytest.fixture
def soap():
    """No variants: the product itself is purchasable."""
    return CatalogProduct(id="p-soap", name="Herbal Soap", price=150)

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from storefront.extensions import db
from storefront.models.draft_order import DraftOrder


def _totals(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    quote = snapshot.get("quote") or {}
    return {
        "subtotal": quote.get("subtotal", 0),
        "shipping_cost": quote.get("shipping_cost", 0),
        "total": quote.get("total", 0),
    }


class SqlDraftStore:
    """
    DraftStore backed by the ``draft_orders`` table.

    Each call runs in a worker thread inside its own app context so the
    event loop is never blocked on the database.
    """

    def __init__(self, app):
        self.app = app

    async def find_open(self, session_id: str) -> Optional[str]:
        return await asyncio.to_thread(self._find_open, session_id)

    async def create(self, session_id: str, snapshot: Dict[str, Any]) -> str:
        return await asyncio.to_thread(self._create, session_id, snapshot)

    async def update(self, draft_id: str, snapshot: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._update, draft_id, snapshot)

    async def mark_converted(self, draft_id: str) -> None:
        await asyncio.to_thread(self._mark_converted, draft_id)

    def _find_open(self, session_id):
        with self.app.app_context():
            draft = (
                DraftOrder.query
                .filter_by(session_id=session_id, is_converted=False)
                .order_by(DraftOrder.created_at.desc())
                .first()
            )
            return draft.id if draft else None

    def _create(self, session_id, snapshot):
        with self.app.app_context():
            draft = DraftOrder(session_id=session_id, snapshot=snapshot, **_totals(snapshot))
            db.session.add(draft)
            db.session.commit()
            return draft.id

    def _update(self, draft_id, snapshot):
        with self.app.app_context():
            draft = db.session.get(DraftOrder, draft_id)
            if draft is None or draft.is_converted:
                return
            draft.snapshot = snapshot
            for key, value in _totals(snapshot).items():
                setattr(draft, key, value)
            db.session.commit()

    def _mark_converted(self, draft_id):
        with self.app.app_context():
            draft = db.session.get(DraftOrder, draft_id)
            if draft is None or draft.is_converted:
                return
            draft.is_converted = True
            draft.converted_at = datetime.now(timezone.utc)
            db.session.commit()

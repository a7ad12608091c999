from storefront.extensions import db
from .base import BaseModel


class DraftOrder(BaseModel):
    """
    Autosaved checkout in progress.

    At most one unconverted row per session is expected; that is kept by
    look-up-before-insert in the autosaver, not by a constraint.
    """
    __tablename__ = "draft_orders"

    session_id = db.Column(db.String(64), nullable=False, index=True)
    snapshot = db.Column(db.JSON, nullable=False, default=dict)
    subtotal = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    shipping_cost = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    is_converted = db.Column(db.Boolean, nullable=False, default=False, index=True)
    converted_at = db.Column(db.DateTime(timezone=True), nullable=True)

"""
Build capture flows wired to the application's collaborators.

Must be awaited inside an app context; the flows themselves outlive it.
"""
from typing import Sequence

from flask import current_app

from storefront.domain.pricing import DEFAULT_ZONE
from storefront.domain.risk import RiskThresholds
from .autosave import DraftAutosaver
from .capture import OrderCaptureFlow
from .collaborators import CatalogReader
from .manual_order import ManualOrderEntry


async def open_checkout(
    catalog: CatalogReader,
    product_ids: Sequence[str],
    *,
    session_id: str,
    free_delivery: bool = False,
    zone=DEFAULT_ZONE,
) -> OrderCaptureFlow:
    products = await catalog.get_products(product_ids)

    autosaver = DraftAutosaver(
        current_app.extensions["draft_store"],
        session_id,
        delay=current_app.config["DRAFT_AUTOSAVE_SECONDS"],
    )
    return OrderCaptureFlow(
        products,
        current_app.extensions["order_submitter"],
        zone=zone,
        free_delivery=free_delivery,
        autosaver=autosaver,
    )


async def open_manual_order(
    catalog: CatalogReader,
    product_ids: Sequence[str],
    *,
    zone=DEFAULT_ZONE,
) -> ManualOrderEntry:
    products = await catalog.get_products(product_ids)

    return ManualOrderEntry(
        products,
        current_app.extensions["order_submitter"],
        courier=current_app.extensions["courier_history"],
        thresholds=RiskThresholds.from_config(current_app.config),
        zone=zone,
    )

"""
Admin-side manual order entry.

Same capture lifecycle as the visitor flow, with several line items, an
editable delivery charge and a courier-history lookup that follows the
phone field.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from storefront.application.courier.history import CourierHistoryService
from storefront.domain.invariants.exceptions import InvariantViolation
from storefront.domain.phone import normalize_phone, parse_pasted_contact
from storefront.domain.pricing import DEFAULT_ZONE, ShippingZone
from storefront.domain.risk import (
    DEFAULT_THRESHOLDS,
    CourierHistoryRecord,
    RiskBand,
    RiskThresholds,
    classify_risk,
)
from .capture import OrderCaptureFlow, PurchaseOption
from .collaborators import CatalogProduct, OrderLine, OrderSubmitter

logger = logging.getLogger(__name__)


@dataclass
class ManualLine:
    option: PurchaseOption
    quantity: int = 1


class ManualOrderEntry(OrderCaptureFlow):
    order_source = "manual"
    auto_select = False

    def __init__(
        self,
        products: Sequence[CatalogProduct],
        submitter: OrderSubmitter,
        *,
        courier: Optional[CourierHistoryService] = None,
        thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
        zone: ShippingZone = DEFAULT_ZONE,
    ):
        self.items: List[ManualLine] = []
        self.courier = courier
        self.thresholds = thresholds
        self.courier_record: Optional[CourierHistoryRecord] = None
        self.delivery_override: Optional[float] = None
        self._lookup: Optional[asyncio.Task] = None
        super().__init__(products, submitter, zone=zone)

    # -------------------------------------------------
    # Line items
    # -------------------------------------------------
    def add_item(self, product_id: str, variant_id: Optional[str] = None, quantity: int = 1) -> None:
        option = self._option(product_id, variant_id)
        for line in self.items:
            if line.option.key == option.key:
                self._edit()
                line.quantity += max(int(quantity), 1)
                self._changed()
                return
        self._choose(option)
        self.items[-1].quantity = max(int(quantity), 1)

    def set_item_quantity(self, product_id: str, variant_id: Optional[str], quantity: int) -> None:
        line = self._line(product_id, variant_id)
        self._edit()
        line.quantity = max(int(quantity), 1)
        self._changed()

    def remove_item(self, product_id: str, variant_id: Optional[str] = None) -> None:
        line = self._line(product_id, variant_id)
        self._edit()
        self.items.remove(line)
        self.selected = self.items[-1].option if self.items else None
        self._changed()

    def lines(self) -> Tuple[OrderLine, ...]:
        return tuple(
            OrderLine(
                product_id=line.option.product.id,
                variant_id=line.option.variant.id if line.option.variant else None,
                quantity=line.quantity,
                unit_price=line.option.unit_price,
                name=line.option.label,
            )
            for line in self.items
        )

    # -------------------------------------------------
    # Delivery charge
    # -------------------------------------------------
    def set_delivery_charge(self, amount: float) -> None:
        self._edit()
        self.delivery_override = amount
        self._changed()

    def reset_delivery_charge(self) -> None:
        self._edit()
        self.delivery_override = None
        self._changed()

    def delivery_charge(self) -> Optional[float]:
        return self.delivery_override

    # -------------------------------------------------
    # Phone and courier history
    # -------------------------------------------------
    def set_phone(self, phone: str) -> None:
        """Update the phone and restart the courier lookup for it."""
        self.set_contact(phone=phone)
        self._restart_lookup()

    def apply_paste(self, text: str) -> Dict[str, str]:
        parsed = parse_pasted_contact(text)
        if parsed:
            self.set_contact(
                name=parsed.get("name"),
                address=parsed.get("address"),
            )
        if "phone" in parsed:
            self.set_phone(parsed["phone"])
        return parsed

    @property
    def risk_band(self) -> RiskBand:
        return classify_risk(self.courier_record, self.thresholds)

    async def wait_for_lookup(self) -> None:
        task = self._lookup
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def discard(self) -> None:
        self._cancel_lookup()
        super().discard()

    def request_extras(self) -> Dict[str, Any]:
        quote = self.quote
        return {
            "discount": quote.discount,
            "advance": quote.advance,
            "delivery_charge": quote.shipping_cost,
            "total": quote.total,
        }

    def display(self) -> Dict[str, Any]:
        data = super().display()
        data["items"] = [line.to_dict() for line in self.lines()]
        data["delivery_override"] = self.delivery_override
        data["courier"] = self.courier_record.to_dict() if self.courier_record else None
        data["risk_band"] = self.risk_band.value
        return data

    # -------------------------------------------------
    # Internals
    # -------------------------------------------------
    def _choose(self, option: PurchaseOption) -> None:
        super()._choose(option)
        self.items.append(ManualLine(option))

    def _option(self, product_id: str, variant_id: Optional[str]) -> PurchaseOption:
        for option in self.options:
            if option.key == (product_id, variant_id):
                return option
        raise InvariantViolation(f"Not a purchasable option: {product_id}/{variant_id}")

    def _line(self, product_id: str, variant_id: Optional[str]) -> ManualLine:
        for line in self.items:
            if line.option.key == (product_id, variant_id):
                return line
        raise InvariantViolation(f"Item not in order: {product_id}/{variant_id}")

    def _cancel_lookup(self) -> None:
        if self._lookup is not None and not self._lookup.done():
            self._lookup.cancel()
        self._lookup = None

    def _restart_lookup(self) -> None:
        self._cancel_lookup()
        self.courier_record = None
        if self.courier is None:
            return
        phone = normalize_phone(self.contact.phone)
        if len(phone) != 11:
            return
        self._lookup = asyncio.get_running_loop().create_task(self._run_lookup(phone))

    async def _run_lookup(self, phone: str) -> None:
        record = await self.courier.get_history(phone)
        if self.discarded or normalize_phone(self.contact.phone) != phone:
            return
        self.courier_record = record

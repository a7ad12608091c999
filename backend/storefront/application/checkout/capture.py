"""
Order capture for one checkout-capable section (or the standalone checkout).

The flow owns the visitor's in-progress choices, prices them through the
pricing module on every read, and hands a validated request to the order
submitter. State changes go through ``assert_capture_transition``.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from storefront.domain.invariants.exceptions import (
    InvariantViolation,
    OrderSubmissionError,
    OrderValidationError,
)
from storefront.domain.lifecycle.order_capture import CaptureState, assert_capture_transition
from storefront.domain.phone import is_valid_phone, to_ascii_digits
from storefront.domain.pricing import DEFAULT_ZONE, Quote, ShippingZone, parse_zone, quote_order
from .autosave import DraftAutosaver
from .collaborators import (
    CatalogProduct,
    CatalogVariant,
    Contact,
    OrderLine,
    OrderReceipt,
    OrderRequest,
    OrderSubmitter,
)

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_ADDRESS_LENGTH = 300
SUBMIT_FAILED_MESSAGE = "Order could not be placed. Please try again."


@dataclass(frozen=True)
class PurchaseOption:
    """A product, or one of its active variants, that can be bought."""

    product: CatalogProduct
    variant: Optional[CatalogVariant] = None

    @property
    def key(self) -> Tuple[str, Optional[str]]:
        return (self.product.id, self.variant.id if self.variant else None)

    @property
    def unit_price(self) -> float:
        return self.variant.price if self.variant else self.product.price

    @property
    def label(self) -> str:
        if self.variant:
            return f"{self.product.name} - {self.variant.name}"
        return self.product.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product.id,
            "variant_id": self.variant.id if self.variant else None,
            "label": self.label,
            "unit_price": self.unit_price,
        }


def purchase_options(products: Iterable[CatalogProduct]) -> Tuple[PurchaseOption, ...]:
    options: List[PurchaseOption] = []
    for product in products:
        variants = product.purchasable_variants()
        if variants:
            options.extend(PurchaseOption(product, v) for v in variants)
        elif not product.variants:
            options.append(PurchaseOption(product))
    return tuple(options)


class OrderCaptureFlow:
    order_source = "web"
    # A lone purchasable option is chosen on open.
    auto_select = True

    def __init__(
        self,
        products: Sequence[CatalogProduct],
        submitter: OrderSubmitter,
        *,
        zone: ShippingZone = DEFAULT_ZONE,
        free_delivery: bool = False,
        autosaver: Optional[DraftAutosaver] = None,
    ):
        self.options = purchase_options(products)
        self.submitter = submitter
        self.autosaver = autosaver
        self.state = CaptureState.IDLE
        self.selected: Optional[PurchaseOption] = None
        self.quantity = 1
        self.zone = parse_zone(zone)
        self.free_delivery = free_delivery
        self.contact = Contact()
        self.discount = 0
        self.advance = 0
        self.notes = ""
        self.error: Optional[str] = None
        self.receipt: Optional[OrderReceipt] = None
        self.discarded = False

        if self.auto_select and len(self.options) == 1:
            self._choose(self.options[0])

    # -------------------------------------------------
    # Visitor actions
    # -------------------------------------------------
    def select_variant(self, product_id: str, variant_id: Optional[str] = None) -> None:
        for option in self.options:
            if option.key == (product_id, variant_id):
                self._choose(option)
                return
        raise InvariantViolation(f"Not a purchasable option: {product_id}/{variant_id}")

    def set_quantity(self, quantity: int) -> None:
        self._edit()
        self.quantity = max(int(quantity), 1)
        self._changed()

    def set_zone(self, zone) -> None:
        self._edit()
        self.zone = parse_zone(zone)
        self._changed()

    def set_contact(self, *, name: Optional[str] = None, phone: Optional[str] = None,
                    address: Optional[str] = None) -> None:
        self._edit()
        self.contact = Contact(
            name=self.contact.name if name is None else name,
            phone=self.contact.phone if phone is None else phone,
            address=self.contact.address if address is None else address,
        )
        self._changed()

    def set_adjustments(self, *, discount=None, advance=None) -> None:
        """Discount and advance payment; negative values count as zero."""
        self._edit()
        if discount is not None:
            self.discount = discount
        if advance is not None:
            self.advance = advance
        self._changed()

    def set_notes(self, notes: str) -> None:
        self._edit()
        self.notes = notes or ""
        self._changed()

    # -------------------------------------------------
    # Derived values
    # -------------------------------------------------
    def lines(self) -> Tuple[OrderLine, ...]:
        if self.selected is None:
            return ()
        return (
            OrderLine(
                product_id=self.selected.product.id,
                variant_id=self.selected.variant.id if self.selected.variant else None,
                quantity=self.quantity,
                unit_price=self.selected.unit_price,
                name=self.selected.label,
            ),
        )

    def delivery_charge(self) -> Optional[float]:
        return None

    @property
    def quote(self) -> Quote:
        return quote_order(
            [(line.unit_price, line.quantity) for line in self.lines()],
            self.zone,
            discount=self.discount,
            advance=self.advance,
            free_delivery=self.free_delivery,
            delivery_charge=self.delivery_charge(),
        )

    def validation_errors(self) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        name = self.contact.name.strip()
        address = self.contact.address.strip()

        if not self.lines():
            errors["variant"] = "Select a product option"
        if not name:
            errors["name"] = "Name is required"
        elif len(name) > MAX_NAME_LENGTH:
            errors["name"] = f"Name must be at most {MAX_NAME_LENGTH} characters"
        if not self.contact.phone.strip():
            errors["phone"] = "Phone number is required"
        elif not is_valid_phone(self.contact.phone):
            errors["phone"] = "Enter a valid mobile number"
        if not address:
            errors["address"] = "Address is required"
        elif len(address) > MAX_ADDRESS_LENGTH:
            errors["address"] = f"Address must be at most {MAX_ADDRESS_LENGTH} characters"
        return errors

    def validate(self) -> None:
        errors = self.validation_errors()
        if errors:
            raise OrderValidationError(errors)

    def to_request(self) -> OrderRequest:
        return OrderRequest(
            zone=self.zone,
            lines=self.lines(),
            contact=Contact(
                name=self.contact.name.strip(),
                phone=to_ascii_digits(self.contact.phone).replace(" ", ""),
                address=self.contact.address.strip(),
            ),
            source=self.order_source,
            notes=self.notes,
            extras=self.request_extras(),
        )

    def request_extras(self) -> Dict[str, Any]:
        return {}

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "zone": self.zone.value,
            "items": [line.to_dict() for line in self.lines()],
            "contact": self.contact.to_dict(),
            "quote": self.quote.to_dict(),
        }

    def display(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "options": [option.to_dict() for option in self.options],
            "selected": self.selected.to_dict() if self.selected else None,
            "quantity": self.quantity,
            "zone": self.zone.value,
            "free_delivery": self.free_delivery,
            "contact": self.contact.to_dict(),
            "quote": self.quote.to_dict(),
            "error": self.error,
            "receipt": self.receipt.to_dict() if self.receipt else None,
        }

    # -------------------------------------------------
    # Submission
    # -------------------------------------------------
    async def submit(self) -> Optional[OrderReceipt]:
        """
        Validate and hand the order to the submitter.

        A second call while one is in flight returns None without
        contacting the submitter. Failures leave the flow in FAILED with
        every entered value intact; calling again retries.
        """
        if self.state == CaptureState.SUBMITTING:
            return None
        if self.state == CaptureState.CONFIRMED:
            return self.receipt

        self.validate()
        if self.state == CaptureState.FAILED:
            self._transition(CaptureState.FILLING)
        self._transition(CaptureState.SUBMITTING)
        self.error = None

        try:
            receipt = await self.submitter.submit(self.to_request())
            if receipt is None or not receipt.order_id:
                raise OrderSubmissionError(SUBMIT_FAILED_MESSAGE)
        except asyncio.CancelledError:
            self._transition(CaptureState.FAILED)
            self.error = SUBMIT_FAILED_MESSAGE
            raise
        except Exception as exc:
            logger.error("Order submission failed (%s source): %s", self.order_source, exc)
            self._transition(CaptureState.FAILED)
            self.error = str(exc) or SUBMIT_FAILED_MESSAGE
            return None

        self._transition(CaptureState.CONFIRMED)
        self.receipt = receipt
        if self.autosaver is not None:
            await self.autosaver.mark_converted()
        self.discard()
        return receipt

    def discard(self) -> None:
        self.discarded = True
        if self.autosaver is not None:
            self.autosaver.close()

    # -------------------------------------------------
    # Internals
    # -------------------------------------------------
    def _choose(self, option: PurchaseOption) -> None:
        if self.state in (CaptureState.FILLING, CaptureState.FAILED):
            self._edit()
        else:
            self._transition(CaptureState.VARIANT_CHOSEN)
        self.selected = option
        self.quantity = 1
        self._changed()

    def _edit(self) -> None:
        # Edits before a selection only record data.
        if self.state == CaptureState.IDLE:
            return
        self._transition(CaptureState.FILLING)

    def _transition(self, to_state: CaptureState) -> None:
        assert_capture_transition(from_state=self.state, to_state=to_state)
        self.state = to_state

    def _changed(self) -> None:
        if self.autosaver is not None and self.lines():
            self.autosaver.notify(self.snapshot())

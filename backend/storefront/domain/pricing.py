from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class ShippingZone(str, Enum):
    INSIDE_LOCAL = "inside_local"
    OUTSIDE_LOCAL = "outside_local"


# Single source of truth for delivery charges.
SHIPPING_RATES = {
    ShippingZone.INSIDE_LOCAL: 60,
    ShippingZone.OUTSIDE_LOCAL: 120,
}

DEFAULT_ZONE = ShippingZone.OUTSIDE_LOCAL


@dataclass(frozen=True)
class Quote:
    subtotal: float
    discount: float
    shipping_cost: float
    advance: float
    total: float

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "shipping_cost": self.shipping_cost,
            "advance": self.advance,
            "total": self.total,
        }


def parse_zone(value) -> ShippingZone:
    if isinstance(value, ShippingZone):
        return value
    try:
        return ShippingZone(value)
    except ValueError:
        raise ValueError(f"Unknown shipping zone: {value!r}") from None


def shipping_cost(zone: ShippingZone, *, free_delivery: bool = False) -> int:
    if free_delivery:
        return 0
    return SHIPPING_RATES[parse_zone(zone)]


def _non_negative(value) -> float:
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        return 0
    return amount if amount > 0 else 0


def quote_order(
    lines: Iterable[Tuple[float, int]],
    zone: ShippingZone,
    *,
    discount=0,
    advance=0,
    free_delivery: bool = False,
    delivery_charge: Optional[float] = None,
) -> Quote:
    """
    Price an order from (unit_price, quantity) lines.

    total = max(subtotal - discount, 0) + shipping - advance, floored at 0.
    Negative discount/advance inputs count as zero. An explicit
    ``delivery_charge`` replaces the zone rate; ``free_delivery`` wins over both.
    """
    subtotal = sum(_non_negative(price) * max(int(qty), 1) for price, qty in lines)
    discount = _non_negative(discount)
    advance = _non_negative(advance)

    if free_delivery:
        shipping = 0
    elif delivery_charge is not None:
        shipping = _non_negative(delivery_charge)
    else:
        shipping = SHIPPING_RATES[parse_zone(zone)]

    total = max(subtotal - discount, 0) + shipping - advance
    return Quote(
        subtotal=subtotal,
        discount=discount,
        shipping_cost=shipping,
        advance=advance,
        total=max(total, 0),
    )


def quote_section(unit_price, quantity: int, zone: ShippingZone, *, free_delivery: bool = False) -> Quote:
    """Checkout-section pricing: one line, no discount or advance."""
    return quote_order([(unit_price, quantity)], zone, free_delivery=free_delivery)

"""
Contracts the checkout core consumes.

Implementations live in ``storefront.integrations`` (HTTP) and
``draft_store`` (SQL); tests pass in-memory fakes.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from storefront.domain.pricing import ShippingZone
from storefront.domain.risk import CourierHistoryRecord


@dataclass(frozen=True)
class CatalogVariant:
    id: str
    name: str
    price: float
    original_price: Optional[float] = None
    stock: int = 0
    is_active: bool = True
    sort_order: int = 0

    @property
    def purchasable(self) -> bool:
        return self.is_active


@dataclass(frozen=True)
class CatalogProduct:
    id: str
    name: str
    price: float
    image: Optional[str] = None
    variants: Tuple[CatalogVariant, ...] = ()

    def purchasable_variants(self) -> Tuple[CatalogVariant, ...]:
        active = [v for v in self.variants if v.purchasable]
        return tuple(sorted(active, key=lambda v: v.sort_order))


@dataclass(frozen=True)
class Contact:
    name: str = ""
    phone: str = ""
    address: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "phone": self.phone, "address": self.address}


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    variant_id: Optional[str]
    quantity: int
    unit_price: float
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "name": self.name,
        }


@dataclass(frozen=True)
class OrderRequest:
    zone: ShippingZone
    lines: Tuple[OrderLine, ...]
    contact: Contact
    source: str = "web"
    notes: str = ""
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderReceipt:
    order_id: str
    order_number: str

    def to_dict(self) -> Dict[str, str]:
        return {"order_id": self.order_id, "order_number": self.order_number}


class CatalogReader(Protocol):
    async def get_products(self, product_ids: Sequence[str]) -> List[CatalogProduct]: ...


class OrderSubmitter(Protocol):
    async def submit(self, request: OrderRequest) -> OrderReceipt: ...


class DraftStore(Protocol):
    async def find_open(self, session_id: str) -> Optional[str]: ...

    async def create(self, session_id: str, snapshot: Dict[str, Any]) -> str: ...

    async def update(self, draft_id: str, snapshot: Dict[str, Any]) -> None: ...

    async def mark_converted(self, draft_id: str) -> None: ...


class CourierHistorySource(Protocol):
    async def fetch(self, phone: str) -> Optional[CourierHistoryRecord]: ...

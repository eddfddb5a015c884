from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional, Tuple

CENTS = Decimal("0.01")


def format_price(amount: Any) -> str:
    """Render a decimal amount string as dollars, e.g. ``"19.5"`` -> ``"$19.50"``.

    Never raises: missing or malformed amounts render as ``$0.00``.
    """
    zero = Decimal(0).quantize(CENTS)
    if amount is None or isinstance(amount, bool):
        return f"${zero}"
    try:
        value = Decimal(str(amount).strip())
        if not value.is_finite():
            return f"${zero}"
        cents = value.quantize(CENTS, rounding=ROUND_HALF_UP)
        if cents.is_zero():
            cents = cents.copy_abs()
        return f"${cents}"
    except (InvalidOperation, ValueError, TypeError):
        return f"${zero}"


@dataclass(frozen=True)
class Money:
    amount: str = "0"
    currency_code: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "Money":
        # Storefront returns {amount, currencyCode}; older payloads a bare string
        if isinstance(raw, dict):
            amount = raw.get("amount")
            return cls(amount=str(amount) if amount not in (None, "") else "0",
                       currency_code=str(raw.get("currencyCode") or ""))
        if raw in (None, ""):
            return cls()
        return cls(amount=str(raw))

    @property
    def display(self) -> str:
        return format_price(self.amount)


@dataclass(frozen=True)
class Variant:
    id: str
    title: str
    price: Money = field(default_factory=Money)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "price": {"amount": self.price.amount, "currencyCode": self.price.currency_code}}


@dataclass(frozen=True)
class Product:
    id: str
    title: str
    description: str = ""
    handle: str = ""
    images: Tuple[str, ...] = ()
    variants: Tuple[Variant, ...] = ()

    @property
    def purchasable(self) -> bool:
        return bool(self.variants)

    @property
    def default_variant(self) -> Optional[Variant]:
        return self.variants[0] if self.variants else None

    @property
    def image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "handle": self.handle,
            "images": list(self.images),
            "variants": [v.to_dict() for v in self.variants],
        }


def map_variant(raw: Dict[str, Any]) -> Variant:
    return Variant(
        id=str(raw["id"]),
        title=raw.get("title") or "",
        price=Money.from_raw(raw.get("price")),
    )


def map_product(raw: Dict[str, Any]) -> Product:
    """Project a raw platform record onto ``Product``, keeping platform order."""
    images = []
    for image in raw.get("images") or []:
        src = (image.get("src") or image.get("url")) if isinstance(image, dict) else image
        if src:
            images.append(str(src))
    return Product(
        id=str(raw["id"]),
        title=raw.get("title") or "",
        description=raw.get("description") or "",
        handle=raw.get("handle") or "",
        images=tuple(images),
        variants=tuple(map_variant(v) for v in raw.get("variants") or []),
    )

"""
Invoice Data Classes.

This module defines the snapshot handed to the renderer: the parties,
the ordered line items, the optional logo and the display date.

Snapshots are frozen. Building one through ``Invoice.from_dict`` copies
the caller's item list into a tuple, so later edits to the form state
never reach a render that is already running.

Author: ML Engineering Team
"""

import base64
import binascii
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from config import get_config
from src.utils.exceptions import InvoiceDataError

DATA_URL_PATTERN = re.compile(
    r'^data:(?P<mime>[\w.+/-]*)(?:;[\w=.-]+)*;base64,(?P<payload>.*)$',
    re.DOTALL
)

# Form field names mapped to snapshot attributes
FIELD_ALIASES = {
    'businessName': 'business_name',
    'businessAddress': 'business_address',
    'recipientName': 'recipient_name',
    'recipientAddress': 'recipient_address',
    'totalAmount': 'total_amount',
}


def to_decimal(value: Any, field_name: str) -> Decimal:
    """
    Convert a form value into an exact decimal.

    Floats go through their shortest repr so ``0.1`` stays ``0.1``.

    Raises:
        InvoiceDataError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise InvoiceDataError(field_name, value, "boolean is not a number")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip() or "0")
        except InvalidOperation:
            raise InvoiceDataError(field_name, value, "not a number")
    else:
        raise InvoiceDataError(field_name, value, f"unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise InvoiceDataError(field_name, value, "not a finite number")
    return result


def decode_logo(value: Union[bytes, bytearray, str, None]) -> Optional[bytes]:
    """
    Normalize a logo value to raw image bytes.

    Accepts raw bytes, a ``data:image/...;base64,`` URL as produced by a
    browser file reader, or a bare base64 string. Empty values mean no logo.
    Whether the bytes are a decodable image is checked by the renderer.

    Raises:
        InvoiceDataError: If a string value is not valid base64.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value) or None
    if not isinstance(value, str):
        raise InvoiceDataError("logo", type(value).__name__, "expected bytes or base64 text")

    text = value.strip()
    if not text:
        return None

    match = DATA_URL_PATTERN.match(text)
    payload = match.group('payload') if match else text

    try:
        return base64.b64decode(payload, validate=True) or None
    except (binascii.Error, ValueError) as e:
        raise InvoiceDataError("logo", text[:32], f"invalid base64 payload: {e}")


def default_display_date(value: Union[str, date, datetime, None] = None) -> str:
    """
    Format the invoice date for display.

    Strings are opaque and returned unchanged. Date objects and the
    missing-date case (today) use ``document.date.display_format``.
    """
    if isinstance(value, str):
        return value

    display_format = get_config("document.date.display_format", "%d/%m/%Y")
    if value is None:
        value = datetime.now()
    return value.strftime(display_format)


@dataclass(frozen=True)
class LineItem:
    """
    One billable row of the invoice.

    Attributes:
        description: Free text shown in the first column
        price: Unit price
        qty: Quantity; zero and negative values are kept as given
    """
    description: str = ""
    price: Decimal = Decimal("0")
    qty: Decimal = Decimal("1")

    def __post_init__(self):
        object.__setattr__(self, 'description', "" if self.description is None else str(self.description))
        object.__setattr__(self, 'price', to_decimal(self.price, 'price'))
        object.__setattr__(self, 'qty', to_decimal(self.qty, 'qty'))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LineItem':
        """
        Create a LineItem from a form row.

        Missing keys fall back to the form's blank row (empty description,
        price 0, quantity 1).
        """
        return cls(
            description=data.get('description', ""),
            price=data.get('price', 0),
            qty=data.get('qty', data.get('quantity', 1))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'price': str(self.price),
            'qty': str(self.qty),
        }


@dataclass(frozen=True)
class Invoice:
    """
    Immutable invoice snapshot consumed by the renderer.

    Attributes:
        business_name: Seller name (Bill From)
        business_address: Seller address, may span several lines
        recipient_name: Buyer name (Bill To)
        recipient_address: Buyer address, may span several lines
        items: Ordered line items, rendered top to bottom
        logo: Raw raster image bytes, or None
        date: Display date text, opaque to the renderer
        total_amount: Caller's total; kept for reference only, the
            renderer always recomputes from the items

    Example:
        >>> invoice = Invoice.from_dict({
        ...     "businessName": "ABC Corp",
        ...     "items": [{"description": "Widget", "price": 12.5, "qty": 2}],
        ... })
        >>> invoice.items[0].price
        Decimal('12.5')
    """
    business_name: str = ""
    business_address: str = ""
    recipient_name: str = ""
    recipient_address: str = ""
    items: Tuple[LineItem, ...] = field(default_factory=tuple)
    logo: Optional[bytes] = None
    date: str = ""
    total_amount: Optional[Decimal] = None

    def __post_init__(self):
        for name in ('business_name', 'business_address', 'recipient_name', 'recipient_address', 'date'):
            value = getattr(self, name)
            object.__setattr__(self, name, "" if value is None else str(value))
        object.__setattr__(self, 'items', tuple(
            item if isinstance(item, LineItem) else LineItem.from_dict(item)
            for item in self.items
        ))
        object.__setattr__(self, 'logo', decode_logo(self.logo))

    @property
    def has_logo(self) -> bool:
        return self.logo is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Invoice':
        """
        Build a snapshot from form state.

        Accepts the form's camelCase keys as well as snake_case ones.

        Args:
            data: Mapping with invoice fields and an ``items`` list.

        Returns:
            Invoice snapshot independent of ``data``.

        Raises:
            InvoiceDataError: If an amount or the logo cannot be read.
        """
        values = {FIELD_ALIASES.get(key, key): value for key, value in data.items()}

        items: Sequence[Any] = values.get('items') or ()
        total_amount = values.get('total_amount')

        return cls(
            business_name=values.get('business_name', ""),
            business_address=values.get('business_address', ""),
            recipient_name=values.get('recipient_name', ""),
            recipient_address=values.get('recipient_address', ""),
            items=tuple(LineItem.from_dict(item) if isinstance(item, Mapping) else item for item in items),
            logo=values.get('logo'),
            date=default_display_date(values.get('date')),
            total_amount=to_decimal(total_amount, 'total_amount') if total_amount is not None else None
        )

    @classmethod
    def coerce(cls, value: Union['Invoice', Mapping[str, Any]]) -> 'Invoice':
        """Return ``value`` as a snapshot, converting mappings."""
        if isinstance(value, Invoice):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        raise InvoiceDataError("invoice", type(value).__name__, "expected Invoice or mapping")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        The logo is reported by size only.
        """
        return {
            'business_name': self.business_name,
            'business_address': self.business_address,
            'recipient_name': self.recipient_name,
            'recipient_address': self.recipient_address,
            'items': [item.to_dict() for item in self.items],
            'logo_bytes': len(self.logo) if self.logo else 0,
            'date': self.date,
            'total_amount': str(self.total_amount) if self.total_amount is not None else None,
        }

    def __repr__(self) -> str:
        return (
            f"Invoice("
            f"from={self.business_name!r}, "
            f"to={self.recipient_name!r}, "
            f"items={len(self.items)}, "
            f"logo={self.has_logo})"
        )

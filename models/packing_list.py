"""
Packing list data models.

These models represent a shipment as it flows through the application:
form -> store -> print.

Conversion:
    - to_dict() produces the JSON shape stored in the record store
    - from_dict() tolerates missing keys: numbers default to 0, strings to "".
      A missing client or address stays None so print validation can
      detect it. An empty mapping (e.g. a box given as {}) is kept and
      takes the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any, List, Mapping, Optional


DEFAULT_SIZES = ["XXXS", "XXS", "XS", "S", "M", "L", "XL", "XXL", "XXXL"]


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


class Carrier(Enum):
    """Shipping company handling a packing list."""

    DHL = "DHL"
    FEDEX = "FedEx"
    UPS = "UPS"
    TORRESTIR = "TORRESTIR"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> "Carrier":
        """Parse a carrier name, case-insensitively. Unknown names map to OTHER."""
        if isinstance(value, cls):
            return value
        text = _to_str(value).strip().lower()
        for carrier in cls:
            if carrier.value.lower() == text:
                return carrier
        return cls.OTHER


@dataclass
class Address:
    """Postal address of a client."""

    street: str = ""
    postal_code: str = ""
    city: str = ""
    state: str = ""
    country: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "street": self.street,
            "postal_code": self.postal_code,
            "city": self.city,
            "state": self.state,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Address":
        return cls(
            street=_to_str(data.get("street")),
            postal_code=_to_str(data.get("postal_code", data.get("postalCode"))),
            city=_to_str(data.get("city")),
            state=_to_str(data.get("state")),
            country=_to_str(data.get("country")),
        )


@dataclass
class Client:
    """
    A client (shipment destination).

    The address is Optional so that an incomplete client can be detected
    before printing.
    """

    id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    address: Optional[Address] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address.to_dict() if self.address else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        address = data.get("address")
        return cls(
            id=_to_str(data.get("id")),
            name=_to_str(data.get("name")),
            email=_to_str(data.get("email")),
            phone=_to_str(data.get("phone")),
            address=Address.from_dict(address) if isinstance(address, Mapping) else None,
        )


@dataclass
class SizeQuantity:
    """Count of units for one size code within one model."""

    size: str
    quantity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"size": self.size, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SizeQuantity":
        return cls(
            size=_to_str(data.get("size")),
            quantity=max(_to_int(data.get("quantity")), 0),
        )


@dataclass
class BoxModel:
    """A style/color variant packed in a box."""

    id: str = ""
    reference: str = ""
    description: str = ""
    color: str = ""
    size_quantities: List[SizeQuantity] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Total units of this model."""
        return sum(sq.quantity for sq in self.size_quantities if sq.quantity > 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "reference": self.reference,
            "description": self.description,
            "color": self.color,
            "size_quantities": [sq.to_dict() for sq in self.size_quantities],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoxModel":
        return cls(
            id=_to_str(data.get("id")),
            reference=_to_str(data.get("reference", data.get("modelReference"))),
            description=_to_str(data.get("description", data.get("modelDescription"))),
            color=_to_str(data.get("color")),
            size_quantities=[
                SizeQuantity.from_dict(sq)
                for sq in (data.get("size_quantities", data.get("sizeQuantities")) or [])
                if isinstance(sq, Mapping)
            ],
        )


@dataclass
class Dimensions:
    """Box dimensions in centimetres."""

    length: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"length": self.length, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dimensions":
        return cls(
            length=_to_float(data.get("length")),
            width=_to_float(data.get("width")),
            height=_to_float(data.get("height")),
        )


@dataclass
class Box:
    """
    A physical shipping unit.

    box_number is 1-based; 0 means "not numbered yet" and is replaced by
    the box position when the packing list is normalized for printing.
    """

    id: str = ""
    box_number: int = 0
    dimensions: Dimensions = field(default_factory=Dimensions)
    net_weight: float = 0.0
    gross_weight: float = 0.0
    models: List[BoxModel] = field(default_factory=list)
    size_descriptions: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        """Total units packed in this box."""
        return sum(model.total for model in self.models)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "box_number": self.box_number,
            "dimensions": self.dimensions.to_dict(),
            "net_weight": self.net_weight,
            "gross_weight": self.gross_weight,
            "models": [model.to_dict() for model in self.models],
            "size_descriptions": dict(self.size_descriptions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Box":
        return cls(
            id=_to_str(data.get("id")),
            box_number=_to_int(data.get("box_number", data.get("boxNumber"))),
            dimensions=Dimensions.from_dict(data.get("dimensions") or {}),
            net_weight=_to_float(data.get("net_weight", data.get("netWeight"))),
            gross_weight=_to_float(data.get("gross_weight", data.get("grossWeight"))),
            models=[BoxModel.from_dict(m) for m in (data.get("models") or []) if isinstance(m, Mapping)],
            size_descriptions={
                _to_str(k): _to_str(v)
                for k, v in (data.get("size_descriptions", data.get("sizeDescriptions")) or {}).items()
            },
        )


@dataclass
class PackingList:
    """
    A shipment manifest grouping one or more boxes bound for one client.

    Lifecycle:
        1. Built from the packing list form (modules.forms)
        2. Stored by PackingListService (code generated on first save)
        3. Loaded and handed to the document renderer for printing
    """

    code: str = ""
    client: Optional[Client] = None
    boxes: List[Box] = field(default_factory=list)
    tracking_numbers: List[str] = field(default_factory=list)
    carrier: Carrier = Carrier.DHL
    custom_carrier: str = ""
    po: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def carrier_display(self) -> str:
        """Carrier name with the custom carrier suffix when present."""
        if self.custom_carrier:
            return f"{self.carrier.value} - {self.custom_carrier}"
        return self.carrier.value

    @property
    def total_items(self) -> int:
        """Total units across all boxes."""
        return sum(box.total for box in self.boxes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage and JSON responses."""
        return {
            "code": self.code,
            "client": self.client.to_dict() if self.client else None,
            "boxes": [box.to_dict() for box in self.boxes],
            "tracking_numbers": list(self.tracking_numbers),
            "carrier": self.carrier.value,
            "custom_carrier": self.custom_carrier,
            "po": self.po,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackingList":
        """
        Create PackingList from a dictionary (form, store row or JSON).

        Args:
            data: Packing list dictionary, snake_case or camelCase keys

        Returns:
            PackingList instance
        """
        client = data.get("client")
        carrier_raw = data.get("carrier")
        carrier = Carrier.parse(carrier_raw) if carrier_raw else Carrier.DHL
        custom_carrier = _to_str(data.get("custom_carrier", data.get("customCarrier")))
        if carrier is Carrier.OTHER and not custom_carrier and carrier_raw:
            raw = _to_str(carrier_raw)
            if raw.lower() != Carrier.OTHER.value.lower():
                custom_carrier = raw

        return cls(
            code=_to_str(data.get("code")),
            client=Client.from_dict(client) if isinstance(client, Mapping) else None,
            boxes=[Box.from_dict(b) for b in (data.get("boxes") or []) if isinstance(b, Mapping)],
            tracking_numbers=[
                _to_str(t) for t in (data.get("tracking_numbers", data.get("trackingNumbers")) or [])
            ],
            carrier=carrier,
            custom_carrier=custom_carrier if carrier is Carrier.OTHER else "",
            po=_to_str(data.get("po")),
            created_at=_to_datetime(data.get("created_at")),
            updated_at=_to_datetime(data.get("updated_at")),
        )

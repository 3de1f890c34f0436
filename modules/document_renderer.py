"""
Printable document rendering for packing lists.

Two layouts are supported:
- label:    one 100x150mm page per box (thermal label printers)
- manifest: A4 cover page with the shipment summary, followed by box
            detail pages of MANIFEST_BOXES_PER_PAGE boxes each

Pipeline (render):
    1. Parse the layout kind
    2. Validate mandatory fields (fail fast, nothing rendered)
    3. Normalize: fill every optional field with its default once
    4. Encode the QR identifier (aborts on failure)
    5. Aggregate and paginate
    6. Render the Jinja2 print templates

Rendering is pure: the packing list passed in is never modified.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.exceptions import ValidationError
from models.packing_list import Address, Box, Client, Dimensions, PackingList
from modules.aggregation import (
    StyleTotal,
    aggregate_styles,
    box_total,
    distinct_tracking_numbers,
    grand_total,
    model_sizes_cell,
)
from modules.qr_encoder import encode_qr_data_url


BRAND_HEADER = "LOMARTEX"
MANIFEST_BOXES_PER_PAGE = 10
NOT_AVAILABLE = "N/A"
MULTIPLE_TRACKING = "Multiple numbers (see box details)"

TEMPLATES_DIR = Path(__file__).parent.parent / "templates" / "print"


class DocumentKind(Enum):
    """Printable layout."""

    LABEL = "label"
    MANIFEST = "manifest"

    @property
    def paper_width(self) -> str:
        return "100mm" if self is DocumentKind.LABEL else "210mm"

    @property
    def paper_height(self) -> str:
        return "150mm" if self is DocumentKind.LABEL else "297mm"

    @property
    def title(self) -> str:
        return "Labels" if self is DocumentKind.LABEL else "Packing List"

    @classmethod
    def parse(cls, value: Union[str, "DocumentKind"]) -> "DocumentKind":
        """
        Parse a layout name. "a4" is accepted for the manifest.

        Raises:
            ValidationError: If the layout is unknown
        """
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text == "a4":
            return cls.MANIFEST
        for kind in cls:
            if kind.value == text:
                return kind
        raise ValidationError("kind", f"Unknown document layout: {value!r}")


# =============================================================================
# VALIDATION & NORMALIZATION
# =============================================================================

def validate_packing_list(packing_list: Optional[PackingList]) -> None:
    """
    Check the fields without which a document cannot be printed.

    Raises:
        ValidationError: Naming the missing field category
    """
    if packing_list is None:
        raise ValidationError("packing_list", "Invalid packing list: No data provided")
    if not packing_list.boxes:
        raise ValidationError("boxes", "Invalid packing list: No boxes found")
    client = packing_list.client
    if client is None or not client.name or client.address is None:
        raise ValidationError("client", "Invalid packing list: Missing client information")
    if not packing_list.code:
        raise ValidationError("code", "Invalid packing list: Missing code")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _number(value: Any) -> float:
    return value if isinstance(value, (int, float)) and value > 0 else 0


def normalize_packing_list(packing_list: PackingList) -> PackingList:
    """
    Return a copy of the packing list with every optional field populated.

    - box_number falls back to the box position (1-based)
    - missing dimensions, weights and quantities become 0
    - missing size descriptions become {}
    - missing strings become ""
    """
    normalized = copy.deepcopy(packing_list)

    client = normalized.client or Client()
    client.name = _text(client.name)
    client.email = _text(client.email)
    client.phone = _text(client.phone)
    address = client.address or Address()
    for name in ("street", "postal_code", "city", "state", "country"):
        setattr(address, name, _text(getattr(address, name)))
    client.address = address
    normalized.client = client

    boxes: List[Box] = []
    for index, box in enumerate(b for b in (normalized.boxes or []) if b is not None):
        if not box.box_number or box.box_number < 1:
            box.box_number = index + 1
        box.dimensions = box.dimensions or Dimensions()
        box.dimensions.length = _number(box.dimensions.length)
        box.dimensions.width = _number(box.dimensions.width)
        box.dimensions.height = _number(box.dimensions.height)
        box.net_weight = _number(box.net_weight)
        box.gross_weight = _number(box.gross_weight)
        box.size_descriptions = {
            _text(k): _text(v) for k, v in (box.size_descriptions or {}).items()
        }
        box.models = [m for m in (box.models or []) if m is not None]
        for model in box.models:
            model.reference = _text(model.reference)
            model.description = _text(model.description)
            model.color = _text(model.color)
            model.size_quantities = [sq for sq in (model.size_quantities or []) if sq is not None]
            for sq in model.size_quantities:
                sq.size = _text(sq.size)
                sq.quantity = int(_number(sq.quantity))
        boxes.append(box)
    normalized.boxes = boxes

    normalized.tracking_numbers = [_text(t).strip() for t in (normalized.tracking_numbers or [])]
    normalized.custom_carrier = _text(normalized.custom_carrier)
    normalized.po = _text(normalized.po).strip()
    return normalized


def format_number(value: Any) -> str:
    """Format a weight or dimension for display: 12.0 -> "12", 12.5 -> "12.5".

    Values print at full precision, never in exponent notation.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "0"
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return "0"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def manifest_page_count(box_count: int) -> int:
    """Cover page plus one detail page per MANIFEST_BOXES_PER_PAGE boxes."""
    return 1 + math.ceil(box_count / MANIFEST_BOXES_PER_PAGE)


def _tracking_at(packing_list: PackingList, index: int) -> str:
    numbers = packing_list.tracking_numbers
    if index < len(numbers) and numbers[index]:
        return numbers[index]
    return NOT_AVAILABLE


def _dimensions_text(box: Box) -> str:
    d = box.dimensions
    return (
        f"{format_number(d.length)} x {format_number(d.width)} x "
        f"{format_number(d.height)} cm"
    )


# =============================================================================
# PAGE MODELS
# =============================================================================

@dataclass
class LabelPage:
    """One label (one box)."""

    box_number: int
    total_boxes: int
    gross_weight: str
    dimensions: str
    tracking: str
    rows: List[StyleTotal]
    total: int


@dataclass
class BoxRow:
    """One row of the manifest box detail table."""

    box_number: int
    total_boxes: int
    references: List[str]
    colors: List[str]
    sizes: List[str]
    total: int
    dimensions: str
    gross_weight: str
    tracking: str


@dataclass
class Manifest:
    """Cover summary and paginated box details for the manifest layout."""

    box_count: int
    total_items: int
    carrier: str
    tracking_summary: str
    show_tracking_column: bool
    style_totals: List[StyleTotal]
    detail_pages: List[List[BoxRow]] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return manifest_page_count(self.box_count)


def build_label_pages(packing_list: PackingList) -> List[LabelPage]:
    """Build one label per box, in input order, from a normalized packing list."""
    total_boxes = len(packing_list.boxes)
    pages = []
    for index, box in enumerate(packing_list.boxes):
        rows = aggregate_styles([box])
        pages.append(LabelPage(
            box_number=box.box_number,
            total_boxes=total_boxes,
            gross_weight=format_number(box.gross_weight),
            dimensions=_dimensions_text(box),
            tracking=_tracking_at(packing_list, index),
            rows=rows,
            total=grand_total(rows),
        ))
    return pages


def build_manifest(packing_list: PackingList) -> Manifest:
    """Aggregate and paginate a normalized packing list for the manifest layout."""
    boxes = packing_list.boxes
    total_boxes = len(boxes)
    style_totals = aggregate_styles(boxes)

    distinct = distinct_tracking_numbers(packing_list.tracking_numbers)
    show_tracking_column = len(distinct) > 1
    if len(distinct) == 1:
        tracking_summary = distinct[0]
    elif not distinct:
        tracking_summary = NOT_AVAILABLE
    else:
        tracking_summary = MULTIPLE_TRACKING

    rows = [
        BoxRow(
            box_number=box.box_number,
            total_boxes=total_boxes,
            references=[m.reference for m in box.models],
            colors=[m.color for m in box.models],
            sizes=[model_sizes_cell(box, m) for m in box.models],
            total=box_total(box),
            dimensions=_dimensions_text(box),
            gross_weight=format_number(box.gross_weight),
            tracking=_tracking_at(packing_list, index) if show_tracking_column else "",
        )
        for index, box in enumerate(boxes)
    ]
    detail_pages = [
        rows[start:start + MANIFEST_BOXES_PER_PAGE]
        for start in range(0, len(rows), MANIFEST_BOXES_PER_PAGE)
    ]

    return Manifest(
        box_count=total_boxes,
        total_items=grand_total(style_totals),
        carrier=packing_list.carrier_display,
        tracking_summary=tracking_summary,
        show_tracking_column=show_tracking_column,
        style_totals=style_totals,
        detail_pages=detail_pages,
    )


# =============================================================================
# RENDERING
# =============================================================================

def _create_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["number"] = format_number
    return env


_environment = _create_environment()


def get_environment() -> Environment:
    """Jinja2 environment holding the print templates."""
    return _environment


def coerce_packing_list(
    packing_list: Union[PackingList, Mapping[str, Any], None]
) -> Optional[PackingList]:
    """Accept a PackingList or its dictionary form."""
    if packing_list is None or isinstance(packing_list, PackingList):
        return packing_list
    if isinstance(packing_list, Mapping):
        return PackingList.from_dict(dict(packing_list))
    raise ValidationError(
        "packing_list", f"Invalid packing list: unsupported type {type(packing_list).__name__}"
    )


def render(
    kind: Union[str, DocumentKind],
    packing_list: Union[PackingList, Mapping[str, Any], None],
) -> str:
    """
    Render a packing list as a printable HTML document.

    Args:
        kind: "label" or "manifest" ("a4" is an alias of "manifest")
        packing_list: PackingList or its dictionary form

    Returns:
        Complete HTML document (title, print CSS, pages)

    Raises:
        ValidationError: Unknown layout or missing mandatory fields
        EncodingError: QR identifier could not be generated
    """
    kind = DocumentKind.parse(kind)
    packing_list = coerce_packing_list(packing_list)
    validate_packing_list(packing_list)
    packing_list = normalize_packing_list(packing_list)

    qr_data_url = encode_qr_data_url(packing_list.code)

    context = {
        "kind": kind,
        "brand": BRAND_HEADER,
        "title": f"{kind.title} - {packing_list.code}",
        "packing_list": packing_list,
        "client": packing_list.client,
        "qr_data_url": qr_data_url,
    }

    if kind is DocumentKind.LABEL:
        template = get_environment().get_template("label.html")
        context["labels"] = build_label_pages(packing_list)
    else:
        template = get_environment().get_template("manifest.html")
        context["manifest"] = build_manifest(packing_list)

    return template.render(**context)

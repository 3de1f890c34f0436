"""
Form parsing for clients and packing lists.

The packing list form is a flat HTML form with indexed field names:

    client-name, client-email, client-street, ...
    carrier, custom_carrier, po
    same_tracking, common_tracking, box-0-tracking, box-1-tracking, ...
    box-0-gross_weight, box-0-length, box-0-size-M (size description)
    box-0-model-1-reference, box-0-model-1-qty-M

All text is stripped of HTML with bleach. Numbers that do not parse, or
are negative, become 0. Zero quantities are dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import bleach

from models.packing_list import (
    DEFAULT_SIZES,
    Address,
    Box,
    BoxModel,
    Carrier,
    Client,
    Dimensions,
    PackingList,
    SizeQuantity,
)


MAX_TEXT_LENGTH = 255
MAX_QUANTITY = 100000

_BOX_FIELD = re.compile(r"^box-(\d+)-(.+)$")
_MODEL_FIELD = re.compile(r"^model-(\d+)-(.+)$")

ADDRESS_FIELDS = ("street", "postal_code", "city", "state", "country")


def sanitize_text(text: Optional[str], max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Sanitize user input text to prevent XSS and injection attacks.

    Args:
        text: Raw input text
        max_length: Maximum length to enforce

    Returns:
        Sanitized text safe for storage and display
    """
    if not text:
        return ""
    text = bleach.clean(text.strip(), tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def parse_float(value: Optional[str]) -> float:
    try:
        number = float(str(value).replace(",", "."))
    except (TypeError, ValueError):
        return 0.0
    return number if number > 0 else 0.0


def parse_quantity(value: Optional[str]) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return 0
    return min(max(number, 0), MAX_QUANTITY)


# =============================================================================
# CLIENT FORM
# =============================================================================

def parse_client_form(form: Mapping[str, Any], prefix: str = "") -> Client:
    """
    Build a Client from form fields.

    Args:
        form: request.form (or any mapping)
        prefix: Field name prefix ("client-" inside the packing list form)
    """
    def value(name: str) -> str:
        return sanitize_text(form.get(f"{prefix}{name}"))

    address = Address(**{name: value(name) for name in ADDRESS_FIELDS})
    return Client(
        id=value("id"),
        name=value("name"),
        email=value("email"),
        phone=value("phone"),
        address=address if any(getattr(address, n) for n in ADDRESS_FIELDS) else None,
    )


# =============================================================================
# PACKING LIST FORM
# =============================================================================

def _parse_model(fields: Dict[str, str]) -> Optional[BoxModel]:
    quantities = []
    for key, raw in fields.items():
        if key.startswith("qty-"):
            size = sanitize_text(key[len("qty-"):], 32)
            quantity = parse_quantity(raw)
            if size and quantity > 0:
                quantities.append(SizeQuantity(size=size, quantity=quantity))

    model = BoxModel(
        id=sanitize_text(fields.get("id")),
        reference=sanitize_text(fields.get("reference")),
        description=sanitize_text(fields.get("description")),
        color=sanitize_text(fields.get("color")),
        size_quantities=quantities,
    )
    if not (model.reference or model.description or model.color or quantities):
        return None
    return model


def _parse_box(fields: Dict[str, str]) -> Optional[Box]:
    if fields.get("remove"):
        return None

    model_fields: Dict[int, Dict[str, str]] = {}
    size_descriptions: Dict[str, str] = {}
    for key, raw in fields.items():
        match = _MODEL_FIELD.match(key)
        if match:
            model_fields.setdefault(int(match.group(1)), {})[match.group(2)] = raw
        elif key.startswith("size-"):
            size = sanitize_text(key[len("size-"):], 32)
            if size:
                size_descriptions[size] = sanitize_text(raw, 64)

    models = [
        model for model in (
            _parse_model(model_fields[index]) for index in sorted(model_fields)
        )
        if model is not None
    ]

    box = Box(
        id=sanitize_text(fields.get("id")),
        dimensions=Dimensions(
            length=parse_float(fields.get("length")),
            width=parse_float(fields.get("width")),
            height=parse_float(fields.get("height")),
        ),
        net_weight=parse_float(fields.get("net_weight")),
        gross_weight=parse_float(fields.get("gross_weight")),
        models=models,
        size_descriptions=size_descriptions,
    )
    blank = not models and not any((
        box.net_weight, box.gross_weight,
        box.dimensions.length, box.dimensions.width, box.dimensions.height,
    ))
    return None if blank else box


def _collect_box_fields(form: Mapping[str, Any]) -> Dict[int, Dict[str, str]]:
    box_fields: Dict[int, Dict[str, str]] = {}
    for key in form.keys():
        match = _BOX_FIELD.match(key)
        if match:
            box_fields.setdefault(int(match.group(1)), {})[match.group(2)] = form.get(key)
    return box_fields


def parse_packing_list_form(form: Mapping[str, Any], code: str = "") -> PackingList:
    """
    Build a PackingList from the packing list form.

    Boxes are numbered by position. With "same_tracking" checked the common
    tracking number is repeated for every box; otherwise each box carries
    its own box-N-tracking field.

    Args:
        form: request.form
        code: Code of the packing list being edited ("" for a new one)
    """
    box_fields = _collect_box_fields(form)

    boxes = []
    individual_tracking = []
    for index in sorted(box_fields):
        box = _parse_box(box_fields[index])
        if box is not None:
            box.box_number = len(boxes) + 1
            boxes.append(box)
            individual_tracking.append(sanitize_text(box_fields[index].get("tracking")))

    if form.get("same_tracking"):
        common = sanitize_text(form.get("common_tracking"))
        tracking_numbers = [common] * len(boxes) if common else []
    else:
        tracking_numbers = individual_tracking if any(individual_tracking) else []

    carrier = Carrier.parse(form.get("carrier") or Carrier.DHL.value)
    custom_carrier = sanitize_text(form.get("custom_carrier")) if carrier is Carrier.OTHER else ""

    return PackingList(
        code=code,
        client=parse_client_form(form, prefix="client-"),
        boxes=boxes,
        tracking_numbers=tracking_numbers,
        carrier=carrier,
        custom_carrier=custom_carrier,
        po=sanitize_text(form.get("po")),
    )


def form_box_position(form: Mapping[str, Any], form_index: int) -> Optional[int]:
    """
    Map a box index used in the form field names (box-<index>-...) to the
    position of that box in the parsed packing list.

    Returns:
        The position, or None when the form has no such box or the box was
        dropped (removed or blank)
    """
    position = 0
    for index, fields in sorted(_collect_box_fields(form).items()):
        kept = _parse_box(fields) is not None
        if index == form_index:
            return position if kept else None
        if kept:
            position += 1
    return None


def validate_packing_list_form(packing_list: PackingList) -> List[str]:
    """
    Check what a packing list needs before it can be saved.

    Returns:
        Translation keys of the problems found (empty when valid)
    """
    errors = []
    client = packing_list.client
    if client is None or not client.name or client.address is None:
        errors.append("packing_list.errors.client_required")
    if not packing_list.boxes:
        errors.append("packing_list.errors.boxes_required")
    return errors


# =============================================================================
# FORM VIEWS (template helpers)
# =============================================================================

@dataclass
class ModelRow:
    """A model row of the box editor with quantities keyed by size code."""

    model: BoxModel
    quantities: Dict[str, int] = field(default_factory=dict)


@dataclass
class BoxEditor:
    """Everything the box editor template needs for one box."""

    box: Box
    sizes: List[str]
    descriptions: Dict[str, str]
    models: List[ModelRow]


def box_editor(box: Optional[Box] = None, extra_models: int = 0) -> BoxEditor:
    """
    Prepare a box for the editor: default sizes plus any custom sizes in
    use, and at least one (possibly blank) model row.
    """
    box = box or Box()
    sizes = list(DEFAULT_SIZES)
    for size in box.size_descriptions:
        if size not in sizes:
            sizes.append(size)
    for model in box.models:
        for sq in model.size_quantities:
            if sq.size not in sizes:
                sizes.append(sq.size)

    descriptions = {size: box.size_descriptions.get(size) or size for size in sizes}
    rows = [
        ModelRow(model=model, quantities={sq.size: sq.quantity for sq in model.size_quantities})
        for model in box.models
    ]
    for _ in range(max(extra_models, 0 if rows else 1)):
        rows.append(ModelRow(model=BoxModel()))

    return BoxEditor(box=box, sizes=sizes, descriptions=descriptions, models=rows)

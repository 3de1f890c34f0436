"""
Per-style quantity aggregation shared by the label and manifest layouts.

Boxes and models are visited in input order. Rows are keyed by
(model reference, color) and come out in first-seen order. Zero
quantities are dropped, never summed.

The functions here expect a normalized packing list (see
modules.document_renderer.normalize_packing_list).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from models.packing_list import Box, BoxModel


@dataclass
class StyleTotal:
    """Aggregated quantities for one (reference, color) pair."""

    style: str
    description: str
    color: str
    sizes: Dict[str, int] = field(default_factory=dict)
    """Display size label -> summed quantity, in first-seen order."""

    total: int = 0

    @property
    def sizes_cell(self) -> str:
        """Sizes as "label:qty" pairs separated by spaces."""
        return " ".join(f"{size}:{qty}" for size, qty in self.sizes.items())


def size_label(box: Box, size: str) -> str:
    """Display label for a size code: the box's description if set, else the code."""
    return box.size_descriptions.get(size) or size


def aggregate_styles(boxes: Iterable[Box]) -> List[StyleTotal]:
    """
    Aggregate quantities per (reference, color) across boxes.

    Args:
        boxes: Boxes to aggregate (one box for a label, all boxes for a manifest)

    Returns:
        StyleTotal rows in first-seen order
    """
    totals: Dict[Tuple[str, str], StyleTotal] = {}

    for box in boxes:
        for model in box.models:
            key = (model.reference, model.color)
            entry = totals.get(key)
            if entry is None:
                entry = StyleTotal(
                    style=model.reference,
                    description=model.description,
                    color=model.color,
                )
                totals[key] = entry

            for sq in model.size_quantities:
                if sq.quantity <= 0:
                    continue
                label = size_label(box, sq.size)
                entry.sizes[label] = entry.sizes.get(label, 0) + sq.quantity
                entry.total += sq.quantity

    return list(totals.values())


def grand_total(style_totals: Iterable[StyleTotal]) -> int:
    """Sum of all per-style totals."""
    return sum(item.total for item in style_totals)


def model_sizes_cell(box: Box, model: BoxModel) -> str:
    """Non-zero "label:qty" pairs of one model, space separated."""
    return " ".join(
        f"{size_label(box, sq.size)}:{sq.quantity}"
        for sq in model.size_quantities
        if sq.quantity > 0
    )


def box_total(box: Box) -> int:
    """Total units in a box, ignoring zero quantities."""
    return box.total


def distinct_tracking_numbers(tracking_numbers: Iterable[str]) -> List[str]:
    """Distinct non-blank tracking numbers in first-seen order."""
    seen: Dict[str, None] = {}
    for number in tracking_numbers:
        number = number.strip()
        if number:
            seen.setdefault(number, None)
    return list(seen)

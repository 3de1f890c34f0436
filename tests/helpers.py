"""Builders for packing list test data."""

from models.packing_list import Box, BoxModel, Dimensions, SizeQuantity


def make_box(box_number=0, models=None, size_descriptions=None, gross_weight=12.5):
    return Box(
        box_number=box_number,
        dimensions=Dimensions(length=60, width=40, height=40),
        net_weight=11.0,
        gross_weight=gross_weight,
        models=models or [],
        size_descriptions=size_descriptions or {},
    )


def make_model(reference, color, description="", **quantities):
    return BoxModel(
        reference=reference,
        description=description,
        color=color,
        size_quantities=[SizeQuantity(size, qty) for size, qty in quantities.items()],
    )

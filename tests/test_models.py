"""
Unit tests for the packing list data models.
"""

from datetime import datetime

from models.packing_list import (
    Address,
    Box,
    BoxModel,
    Carrier,
    Client,
    PackingList,
    SizeQuantity,
)
from tests.helpers import make_box, make_model


class TestCarrier:

    def test_parse_case_insensitive(self):
        assert Carrier.parse("fedex") is Carrier.FEDEX
        assert Carrier.parse("DHL") is Carrier.DHL
        assert Carrier.parse(Carrier.UPS) is Carrier.UPS

    def test_unknown_is_other(self):
        assert Carrier.parse("Courier X") is Carrier.OTHER


class TestTotals:

    def test_model_and_box_totals(self):
        box = make_box(1, [make_model("A", "Red", M=2, L=3), make_model("B", "Blue", S=1)])
        assert box.models[0].total == 5
        assert box.total == 6

    def test_packing_list_total(self, sample_packing_list):
        assert sample_packing_list.total_items == 10


class TestFromDict:
    """Test tolerant dictionary parsing."""

    def test_round_trip(self, sample_packing_list):
        sample_packing_list.created_at = datetime(2026, 10, 19, 14, 30, 5)
        restored = PackingList.from_dict(sample_packing_list.to_dict())
        assert restored == sample_packing_list

    def test_missing_values_default(self):
        box = Box.from_dict({"models": [{"sizeQuantities": [{"size": "M", "quantity": "x"}]}]})
        assert box.box_number == 0
        assert box.gross_weight == 0.0
        assert box.dimensions.length == 0.0
        assert box.size_descriptions == {}
        assert box.models[0].size_quantities[0].quantity == 0

    def test_negative_quantity_clamped(self):
        model = BoxModel.from_dict({"size_quantities": [{"size": "M", "quantity": -4}]})
        assert model.size_quantities[0].quantity == 0

    def test_missing_client_stays_none(self):
        packing_list = PackingList.from_dict({"code": "X"})
        assert packing_list.client is None
        assert packing_list.carrier is Carrier.DHL
        assert packing_list.tracking_numbers == []

    def test_missing_address_stays_none(self):
        assert Client.from_dict({"name": "Acme"}).address is None

    def test_empty_address_kept(self):
        address = Client.from_dict({"name": "Acme", "address": {}}).address
        assert address == Address()

    def test_empty_box_kept(self):
        packing_list = PackingList.from_dict({"boxes": [{}, None, {"models": [{}]}]})
        assert len(packing_list.boxes) == 2
        assert packing_list.boxes[0] == Box()
        assert packing_list.boxes[1].models == [BoxModel()]

    def test_zero_and_negative_quantities_not_counted(self):
        model = BoxModel(size_quantities=[SizeQuantity("M", 4), SizeQuantity("L", -2)])
        assert model.total == 4

    def test_unknown_carrier_becomes_custom(self):
        packing_list = PackingList.from_dict({"carrier": "Courier X"})
        assert packing_list.carrier is Carrier.OTHER
        assert packing_list.custom_carrier == "Courier X"
        assert packing_list.carrier_display == "Other - Courier X"

    def test_custom_carrier_dropped_for_known_carrier(self):
        packing_list = PackingList.from_dict({"carrier": "DHL", "custom_carrier": "ignored"})
        assert packing_list.custom_carrier == ""
        assert packing_list.carrier_display == "DHL"

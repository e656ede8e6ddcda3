"""Tests for projecting Shopify order nodes into the public contract."""

from typing import Any

import pytest

from order_lookup.schemas.order import TrackingEntry
from order_lookup.services.projector import (
    capitalize_words,
    flatten_tracking,
    format_display_status,
    project_order,
)


class TestFormatDisplayStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("UNFULFILLED", "Unfulfilled"),
            ("IN_TRANSIT", "In Transit"),
            ("PARTIALLY_FULFILLED", "Partially Fulfilled"),
            ("ready_for_pickup", "Ready For Pickup"),
            (None, "Unknown"),
            ("", "Unknown"),
        ],
    )
    def test_formats_enum_values(self, raw: str | None, expected: str) -> None:
        assert format_display_status(raw) == expected

    def test_collapses_repeated_separators(self) -> None:
        assert format_display_status("ON__HOLD_") == "On Hold"


class TestCapitalizeWords:
    def test_splits_on_whitespace_only(self) -> None:
        assert capitalize_words("re-attempted delivery") == "Re-attempted Delivery"

    def test_empty(self) -> None:
        assert capitalize_words("") == ""


class TestFlattenTracking:
    def test_preserves_fulfillment_then_entry_order(self) -> None:
        fulfillments = [
            {"trackingInfo": [{"number": "A"}, {"number": "B"}]},
            {"trackingInfo": [{"number": "C"}]},
        ]

        numbers = [entry.number for entry in flatten_tracking(fulfillments)]

        assert numbers == ["A", "B", "C"]

    def test_empty_and_missing_lists_contribute_nothing(self) -> None:
        fulfillments: list[dict[str, Any]] = [
            {"trackingInfo": []},
            {"trackingInfo": None},
            {},
            {"trackingInfo": [{"number": "C", "url": None, "company": "DHL"}]},
        ]

        assert flatten_tracking(fulfillments) == [
            TrackingEntry(number="C", url=None, company="DHL")
        ]

    def test_no_fulfillments(self) -> None:
        assert flatten_tracking(None) == []
        assert flatten_tracking([]) == []


class TestProjectOrder:
    def test_not_found(self) -> None:
        result = project_order(None)

        assert result.model_dump(by_alias=True, exclude_unset=True) == {"found": False}

    def test_found(self, sample_order_node: dict[str, Any]) -> None:
        result = project_order(sample_order_node)
        body = result.model_dump(by_alias=True, exclude_unset=True)

        assert body["found"] is True
        assert body["orderName"] == "#1001"
        assert body["displayStatus"] == "In Transit"
        assert body["statusPageUrl"] == sample_order_node["statusPageUrl"]
        assert [t["number"] for t in body["tracking"]] == [
            "1Z999AA10123456784",
            "1Z999AA10123456785",
            "9400111899223197428490",
        ]
        assert body["tracking"][2]["company"] == "USPS"

    def test_missing_status_page_is_null(self) -> None:
        node = {"name": "#1002", "displayFulfillmentStatus": None, "statusPageUrl": ""}

        body = project_order(node).model_dump(by_alias=True, exclude_unset=True)

        assert body == {
            "found": True,
            "orderName": "#1002",
            "displayStatus": "Unknown",
            "statusPageUrl": None,
            "tracking": [],
        }

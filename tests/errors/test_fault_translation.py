"""Unit tests for fault string classification and translation."""

import pytest

from src.errors.fault_translation import FaultKind, classify_fault, translate_fault


class TestClassifyFault:
    @pytest.mark.parametrize("faultstring,kind", [
        ("ItemMissingCatalogData: SKU-A", FaultKind.IGNORABLE),
        ("The requested order not found", FaultKind.PERMANENT),
        ("RequestThrottled", FaultKind.TRANSIENT),
        ("Request is throttled", FaultKind.TRANSIENT),
        ("ServiceUnavailable", FaultKind.TRANSIENT),
        ("InternalError: try later", FaultKind.TRANSIENT),
        ("Invalid postal code", FaultKind.REJECTED),
    ])
    def test_kinds(self, faultstring, kind):
        assert classify_fault(faultstring) == kind

    @pytest.mark.parametrize("faultstring", [None, ""])
    def test_empty_is_rejected(self, faultstring):
        assert classify_fault(faultstring) == FaultKind.REJECTED

    @pytest.mark.parametrize("faultstring", [
        "itemmissingcatalogdata",
        "ITEMMISSINGCATALOGDATA: SKU-A",
        "The Requested Order Not Found",
    ])
    def test_matching_is_case_sensitive(self, faultstring):
        """Markers only count when they appear verbatim."""
        assert classify_fault(faultstring) == FaultKind.REJECTED

    def test_first_pattern_wins(self):
        faultstring = "ItemMissingCatalogData; requested order not found"
        assert classify_fault(faultstring) == FaultKind.IGNORABLE


class TestTranslateFault:
    def test_catalog_missing(self):
        code, message, remediation = translate_fault("ItemMissingCatalogData: SKU-A")
        assert code == "E-3004"
        assert "ItemMissingCatalogData: SKU-A" in message
        assert "catalog" in remediation

    def test_order_not_found(self):
        code, _, _ = translate_fault("The requested order not found")
        assert code == "E-3003"

    def test_unknown_fault_is_rejection(self):
        code, message, _ = translate_fault("Invalid postal code")
        assert code == "E-3005"
        assert message == "Fulfillment service rejected the request: Invalid postal code"

    def test_code_agrees_with_kind_for_lowercase_marker(self):
        code, _, _ = translate_fault("itemmissingcatalogdata")
        assert code == "E-3005"

    def test_none(self):
        code, message, _ = translate_fault(None)
        assert code == "E-3005"
        assert "no fault string" in message

"""Unit tests for the QuantityRequest and DisplayRequest aggregates."""

import pytest

from supplyhub.domain.exceptions import ValidationError
from supplyhub.domain.model.display_request import DisplayRequest, DisplayRequestStatus
from supplyhub.domain.model.quantity_request import QuantityRequest, QuantityRequestStatus


def _request(quantity: int = 10) -> QuantityRequest:
    return QuantityRequest(
        id="Q1",
        product_id="P-1",
        product_name="Bolts",
        supplier_id="sup-1",
        requested_by="staff-1",
        requested_quantity=quantity,
    )


class TestMerge:

    def test_merge_sums_quantity_and_writes_note(self):
        req = _request(10)
        assert req.merge(5) == 15
        assert req.notes == "Combined request: Original 10 + New 5 = 15 units"

    def test_only_pending_requests_merge(self):
        req = _request()
        req.cancel()
        with pytest.raises(ValidationError, match="Only pending"):
            req.merge(1)

    def test_new_request_needs_positive_quantity(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _request(0)


class TestRespond:

    def test_full_approval_defaults_to_requested_quantity(self):
        req = _request(10)
        req.respond(QuantityRequestStatus.APPROVED_FULL)
        assert req.approved_quantity == 10
        assert req.is_approved
        assert req.responded_at is not None

    def test_full_approval_with_matching_quantity(self):
        req = _request(10)
        req.respond(QuantityRequestStatus.APPROVED_FULL, approved_quantity=10)
        assert req.approved_quantity == 10

    @pytest.mark.parametrize("approved", [0, 4, 11, 25])
    def test_full_approval_must_match_requested(self, approved):
        req = _request(10)
        with pytest.raises(ValidationError, match="cover all 10 requested units"):
            req.respond(QuantityRequestStatus.APPROVED_FULL, approved_quantity=approved)
        assert req.is_pending
        assert req.approved_quantity is None

    @pytest.mark.parametrize("approved", [1, 9])
    def test_partial_approval_within_bounds(self, approved):
        req = _request(10)
        req.respond(QuantityRequestStatus.APPROVED_PARTIAL, approved_quantity=approved)
        assert req.approved_quantity == approved

    @pytest.mark.parametrize("approved", [None, 0, 10, 11])
    def test_partial_approval_out_of_bounds(self, approved):
        req = _request(10)
        with pytest.raises(ValidationError, match="between 1 and 9"):
            req.respond(QuantityRequestStatus.APPROVED_PARTIAL, approved_quantity=approved)
        assert req.is_pending

    def test_rejection_keeps_reason_and_no_quantity(self):
        req = _request()
        req.respond(QuantityRequestStatus.REJECTED, approved_quantity=4, rejection_reason="No stock")
        assert req.status == QuantityRequestStatus.REJECTED
        assert req.approved_quantity is None
        assert req.rejection_reason == "No stock"

    def test_cannot_answer_twice(self):
        req = _request()
        req.respond(QuantityRequestStatus.REJECTED)
        with pytest.raises(ValidationError, match="already been answered"):
            req.respond(QuantityRequestStatus.APPROVED_FULL)

    def test_pending_and_cancelled_are_not_responses(self):
        with pytest.raises(ValidationError, match="not a valid response"):
            _request().respond(QuantityRequestStatus.CANCELLED)


class TestDisplayRequest:

    def _display(self) -> DisplayRequest:
        return DisplayRequest(id="D1", product_id="P-1", product_name="Bolts", supplier_id="sup-1")

    def test_accept_records_reviewer(self):
        req = self._display()
        req.accept("staff-1", "Sam")
        assert req.status == DisplayRequestStatus.ACCEPTED
        assert req.reviewed_by == "staff-1"
        assert req.reviewed_at is not None

    def test_reject_keeps_reason(self):
        req = self._display()
        req.reject("staff-1", "Sam", "Not a fit")
        assert req.status == DisplayRequestStatus.REJECTED
        assert req.rejection_reason == "Not a fit"

    def test_reviewed_once(self):
        req = self._display()
        req.accept("staff-1", "Sam")
        with pytest.raises(ValidationError, match="already been reviewed"):
            req.reject("staff-2", "Kim", None)

"""Unit tests for the Shipment aggregate."""

from datetime import datetime, timezone

import pytest

from supplyhub.domain.exceptions import InvalidTransitionError, ValidationError
from supplyhub.domain.model.shipment import Shipment, ShipmentStatus, ShipmentType
from supplyhub.domain.model.value_objects import Money


def _shipment(type: ShipmentType = ShipmentType.INCOMING, **kwargs) -> Shipment:
    return Shipment.create(
        type,
        kwargs.pop("tracking_number", "TRK-100"),
        kwargs.pop("items", 3),
        kwargs.pop("value", Money.of("250.00")),
        requested_by="staff-1",
        **kwargs,
    )


class TestCreate:

    @pytest.mark.parametrize("type, expected", [
        (ShipmentType.INCOMING, ShipmentStatus.PENDING),
        (ShipmentType.OUTGOING, ShipmentStatus.PROCESSING),
    ])
    def test_initial_status_follows_direction(self, type, expected):
        assert _shipment(type).status == expected

    def test_fields_are_cleaned(self):
        shipment = _shipment(tracking_number="  TRK-7 ", supplier=" Acme ")
        assert shipment.tracking_number == "TRK-7"
        assert shipment.supplier == "Acme"
        assert shipment.id is None
        assert shipment.actual_delivery is None

    def test_tracking_number_required(self):
        with pytest.raises(ValidationError, match="Tracking number is required"):
            _shipment(tracking_number="  ")

    def test_negative_item_count_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _shipment(items=-1)


class TestSetStatus:

    def test_returns_previous_status(self):
        shipment = _shipment()
        assert shipment.set_status(ShipmentStatus.IN_TRANSIT) == ShipmentStatus.PENDING
        assert shipment.status == ShipmentStatus.IN_TRANSIT

    def test_delivery_stamps_actual_date(self):
        shipment = _shipment()
        shipment.set_status(ShipmentStatus.DELIVERED)
        assert shipment.is_final
        assert shipment.actual_delivery == shipment.updated_at

    @pytest.mark.parametrize("final", [ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED])
    def test_final_statuses_are_locked(self, final):
        shipment = _shipment()
        shipment.set_status(final)
        with pytest.raises(InvalidTransitionError, match=f"already {final.value}"):
            shipment.set_status(ShipmentStatus.IN_TRANSIT)
        assert shipment.status == final


class TestUpdateDetails:

    def test_partial_update(self):
        shipment = _shipment()
        eta = datetime(2026, 11, 2, tzinfo=timezone.utc)
        shipment.update_details(items=5, eta=eta)
        assert shipment.items == 5
        assert shipment.eta == eta
        assert shipment.tracking_number == "TRK-100"
        assert shipment.value == Money.of("250.00")

    def test_blank_tracking_number_rejected(self):
        with pytest.raises(ValidationError, match="Tracking number is required"):
            _shipment().update_details(tracking_number=" ")

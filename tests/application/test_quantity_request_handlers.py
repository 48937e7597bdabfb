"""Integration tests for the quantity-request workflow."""

import pytest

from supplyhub.application.cancel_quantity_request import (
    CancelQuantityRequestHandler,
    DeleteQuantityRequestHandler,
)
from supplyhub.application.create_quantity_request import (
    MERGED_TITLE,
    CreateQuantityRequestHandler,
)
from supplyhub.application.events import INVENTORY, QUANTITY_REQUESTS, EventBus
from supplyhub.application.list_quantity_requests import (
    ListQuantityRequestsHandler,
    has_active_quantity_requests,
)
from supplyhub.application.notifications import NotificationService
from supplyhub.application.respond_to_quantity_request import RespondToQuantityRequestHandler
from supplyhub.domain.exceptions import UnauthorizedError, ValidationError
from supplyhub.domain.model.inventory import InventoryItem, MovementType
from supplyhub.domain.model.product import Product
from supplyhub.domain.model.quantity_request import QuantityRequestStatus
from supplyhub.domain.model.value_objects import Money
from tests.fakes import (
    ADMIN,
    OTHER_SUPPLIER,
    STAFF,
    STAFF_2,
    SUPPLIER,
    USER,
    FakeUnitOfWork,
    RecordingEmailSender,
)


def _setup(items: list[InventoryItem] | None = None):
    uow = FakeUnitOfWork(
        items=items,
        products=[
            Product(
                id="P-1", name="Hex Bolt", price=Money.of("0.40"), supplier_id="sup-1",
                supplier_name="Acme Supply", sku="HB-1", category="Fasteners",
            ),
        ],
    )
    sender = RecordingEmailSender()
    notifier = NotificationService(sender)
    events = EventBus()
    return uow, notifier, sender, events


def _create(uow, notifier, actor=STAFF, quantity=10, events=None):
    return CreateQuantityRequestHandler(uow, events, notifier).handle(
        actor, "P-1", quantity, supplier_email="orders@acme.example"
    )


# ── Create and merge ─────────────────────────────────────────────────────────


class TestCreateQuantityRequest:

    def test_new_request_filled_from_product(self):
        uow, notifier, _, _ = _setup()
        dto, merged = _create(uow, notifier)
        assert merged is False
        assert dto.product_name == "Hex Bolt"
        assert dto.supplier_id == "sup-1"
        assert dto.requested_quantity == 10
        assert dto.status == "pending"

    def test_supplier_is_notified_and_emailed(self):
        uow, notifier, sender, _ = _setup()
        _create(uow, notifier)
        [note] = uow.notifications.list_all()
        assert note.user_id == "sup-1"
        assert note.title == "New Quantity Request"
        assert "10 units of Hex Bolt" in note.message
        [(to, template, context)] = sender.sent
        assert to == "orders@acme.example"
        assert template == "quantity_request_created"
        assert context["requested_quantity"] == 10

    def test_second_request_merges_and_notifies_both_requesters(self):
        uow, notifier, sender, _ = _setup()
        first, _ = _create(uow, notifier, STAFF, 10)
        dto, merged = _create(uow, notifier, STAFF_2, 5)

        assert merged is True
        assert dto.id == first.id
        assert dto.requested_quantity == 15
        assert dto.notes == "Combined request: Original 10 + New 5 = 15 units"
        assert len(uow.quantity_requests.list_all()) == 1

        merge_notes = [n for n in uow.notifications.list_all() if n.title == MERGED_TITLE]
        assert {n.user_id for n in merge_notes} == {"staff-1", "staff-2"}
        original = next(n for n in merge_notes if n.user_id == "staff-1")
        assert original.message == (
            "Your quantity request for Hex Bolt was combined with another request. "
            "Total quantity: 15 units"
        )
        newcomer = next(n for n in merge_notes if n.user_id == "staff-2")
        assert newcomer.message == (
            "Your quantity request for Hex Bolt was combined with an existing request. "
            "Total quantity: 15 units"
        )
        assert sender.sent[-1][1] == "quantity_request_combined"

    def test_only_staff_may_request(self):
        uow, notifier, _, _ = _setup()
        with pytest.raises(UnauthorizedError):
            _create(uow, notifier, USER)
        assert uow.quantity_requests.list_all() == []

    def test_unknown_product_needs_name_and_supplier(self):
        uow, notifier, _, _ = _setup()
        with pytest.raises(ValidationError, match="not in the catalog"):
            CreateQuantityRequestHandler(uow, notifier=notifier).handle(STAFF, "P-404", 3)

        dto, _ = CreateQuantityRequestHandler(uow, notifier=notifier).handle(
            STAFF, "P-404", 3, supplier_id="sup-2", product_name="Washer"
        )
        assert dto.product_name == "Washer"

    def test_email_failure_does_not_fail_the_request(self):
        uow, _, _, _ = _setup()
        notifier = NotificationService(RecordingEmailSender(fail=True))
        dto, _ = _create(uow, notifier)
        assert uow.quantity_requests.get_by_id(dto.id) is not None
        assert uow.commits == 1

    def test_has_active_requests(self):
        uow, notifier, _, _ = _setup()
        assert has_active_quantity_requests(uow, "P-1") is False
        _create(uow, notifier)
        assert has_active_quantity_requests(uow, "P-1", "sup-1") is True
        assert has_active_quantity_requests(uow, "P-1", "sup-2") is False


# ── Respond ──────────────────────────────────────────────────────────────────


class TestRespondToQuantityRequest:

    def test_full_approval_creates_unpublished_inventory(self):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        commits_before = uow.commits

        dto = RespondToQuantityRequestHandler(uow, events, notifier).handle(
            request.id, "approved_full", SUPPLIER
        )

        assert dto.status == "approved_full"
        assert dto.approved_quantity == 10
        assert uow.commits == commits_before + 1
        [item] = uow.inventory.list_all()
        assert item.name == "Hex Bolt"
        assert item.quantity == 10
        assert item.min_stock_level == 1
        assert item.max_stock_level == 20
        assert item.is_published is False
        assert item.unit_price == Money.of("0.40")

    def test_approval_restocks_existing_item(self):
        existing = InventoryItem(id="I-1", name="Hex Bolt", supplier_id="sup-1", quantity=7, sku="HB-1")
        uow, notifier, _, events = _setup(items=[existing])
        request, _ = _create(uow, notifier)

        RespondToQuantityRequestHandler(uow, events, notifier).handle(
            request.id, QuantityRequestStatus.APPROVED_PARTIAL, SUPPLIER, approved_quantity=6
        )

        [item] = uow.inventory.list_all()
        assert item.quantity == 13
        [movement] = uow.movements.list_all()
        assert movement.type == MovementType.IN
        assert f"(Request ID: {request.id})" in movement.reason

    def test_failed_restock_leaves_request_pending(self):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        notes_before = uow.notifications.list_all()
        uow.inventory.fail_saves_for = frozenset({"Hex Bolt"})
        seen = []
        events.subscribe(QUANTITY_REQUESTS, lambda e: seen.append(e.topic))

        with pytest.raises(ConnectionError):
            RespondToQuantityRequestHandler(uow, events, notifier).handle(
                request.id, "approved_full", SUPPLIER
            )

        stored = uow.quantity_requests.get_by_id(request.id)
        assert stored.is_pending
        assert stored.approved_quantity is None
        assert uow.inventory.list_all() == []
        assert uow.movements.list_all() == []
        assert uow.notifications.list_all() == notes_before
        assert seen == []

        uow.inventory.fail_saves_for = frozenset()
        dto = RespondToQuantityRequestHandler(uow, events, notifier).handle(
            request.id, "approved_full", SUPPLIER
        )
        assert dto.status == "approved_full"
        assert [i.quantity for i in uow.inventory.list_all()] == [10]

    def test_requester_is_told_the_outcome(self):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        RespondToQuantityRequestHandler(uow, events, notifier).handle(
            request.id, "approved_partial", SUPPLIER, approved_quantity=4
        )
        note = next(n for n in uow.notifications.list_all() if n.user_id == "staff-1")
        assert note.title == "Quantity Request Partially Approved"
        assert "approved 4 of 10 units" in note.message

    @pytest.mark.parametrize("approved", [0, 10, 12])
    def test_partial_approval_bounds(self, approved):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        with pytest.raises(ValidationError, match="between 1 and 9"):
            RespondToQuantityRequestHandler(uow, events, notifier).handle(
                request.id, "approved_partial", SUPPLIER, approved_quantity=approved
            )
        assert uow.inventory.list_all() == []
        assert uow.quantity_requests.get_by_id(request.id).is_pending

    def test_rejection_creates_no_stock(self):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        dto = RespondToQuantityRequestHandler(uow, events, notifier).handle(
            request.id, "rejected", SUPPLIER, rejection_reason="Discontinued line"
        )
        assert dto.rejection_reason == "Discontinued line"
        assert uow.inventory.list_all() == []
        note = next(n for n in uow.notifications.list_all() if n.user_id == "staff-1")
        assert "Reason: Discontinued line" in note.message

    def test_other_supplier_cannot_respond(self):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        with pytest.raises(UnauthorizedError):
            RespondToQuantityRequestHandler(uow, events, notifier).handle(
                request.id, "approved_full", OTHER_SUPPLIER
            )

    def test_staff_cannot_respond_but_admin_can(self):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        handler = RespondToQuantityRequestHandler(uow, events, notifier)
        with pytest.raises(UnauthorizedError):
            handler.handle(request.id, "approved_full", STAFF)
        assert handler.handle(request.id, "approved_full", ADMIN).status == "approved_full"

    def test_events_after_approval(self):
        uow, notifier, _, events = _setup()
        request, _ = _create(uow, notifier)
        seen = []
        events.subscribe(QUANTITY_REQUESTS, lambda e: seen.append(e.topic))
        events.subscribe(INVENTORY, lambda e: seen.append(e.topic))
        RespondToQuantityRequestHandler(uow, events, notifier).handle(
            request.id, "approved_full", SUPPLIER
        )
        assert seen == [QUANTITY_REQUESTS, INVENTORY]


# ── Cancel, delete and list ──────────────────────────────────────────────────


class TestWithdrawQuantityRequest:

    def test_requester_cancels(self):
        uow, notifier, _, _ = _setup()
        request, _ = _create(uow, notifier)
        CancelQuantityRequestHandler(uow).handle(request.id, STAFF)
        assert uow.quantity_requests.get_by_id(request.id).status == QuantityRequestStatus.CANCELLED

    def test_answered_request_cannot_be_cancelled(self):
        uow, notifier, _, _ = _setup()
        request, _ = _create(uow, notifier)
        RespondToQuantityRequestHandler(uow, notifier=notifier).handle(request.id, "rejected", SUPPLIER)
        with pytest.raises(ValidationError, match="Only pending"):
            CancelQuantityRequestHandler(uow).handle(request.id, STAFF)

    def test_only_requester_deletes(self):
        uow, notifier, _, _ = _setup()
        request, _ = _create(uow, notifier)
        with pytest.raises(UnauthorizedError, match="your own requests"):
            DeleteQuantityRequestHandler(uow).handle(request.id, STAFF_2)
        DeleteQuantityRequestHandler(uow).handle(request.id, STAFF)
        assert uow.quantity_requests.list_all() == []

    def test_list_filters(self):
        uow, notifier, _, _ = _setup()
        _create(uow, notifier)
        CreateQuantityRequestHandler(uow, notifier=notifier).handle(
            STAFF_2, "P-9", 2, supplier_id="sup-2", product_name="Nut"
        )
        handler = ListQuantityRequestsHandler(uow)
        assert [r.product_name for r in handler.handle(supplier_id="sup-2")] == ["Nut"]
        assert [r.product_name for r in handler.handle(requested_by="staff-1")] == ["Hex Bolt"]
        assert len(handler.handle(pending_only=True)) == 2

"""Tests for the order status state machine."""

import pytest

from mye_backend.core.errors import (
    InvalidStatusTransitionError,
    StatusUnchangedError,
    UnknownStatusError,
)
from mye_backend.models.order import OrderStatus
from mye_backend.services.order_status import (
    INITIAL_STATUS,
    TRANSITIONS,
    allowed_targets,
    display_name,
    is_terminal,
    parse_status,
    validate_transition,
)


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(TRANSITIONS) == set(OrderStatus)

    def test_initial_status(self):
        assert INITIAL_STATUS == OrderStatus.order_received

    def test_terminal_statuses(self):
        assert is_terminal(OrderStatus.cancelled)
        assert is_terminal(OrderStatus.completed)
        assert not is_terminal(OrderStatus.shipped)

    def test_allowed_targets_accepts_strings(self):
        assert allowed_targets("shipped") == [OrderStatus.completed, OrderStatus.returned]


class TestValidateTransition:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("order_received", "preparing"),
            ("order_received", "cancelled"),
            ("preparing", "shipped"),
            ("preparing", "cancelled"),
            ("shipped", "completed"),
            ("shipped", "returned"),
            ("returned", "completed"),
            ("returned", "cancelled"),
        ],
    )
    def test_allowed(self, current, target):
        assert validate_transition(current, target) == OrderStatus(target)

    def test_same_status_rejected(self):
        with pytest.raises(StatusUnchangedError) as exc_info:
            validate_transition("preparing", "preparing")
        assert str(exc_info.value) == "Order is already in this status"

    def test_skip_rejected_with_allowed_list(self):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            validate_transition("order_received", "shipped")
        message = str(exc_info.value)
        assert 'Cannot transition from "Sipariş Alındı" to "Kargoya Verildi"' in message
        assert "Allowed transitions: preparing, cancelled" in message

    def test_terminal_status_lists_none(self):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            validate_transition("completed", "returned")
        assert exc_info.value.allowed == []
        assert str(exc_info.value).endswith("Allowed transitions: none")

    def test_unknown_target(self):
        with pytest.raises(UnknownStatusError) as exc_info:
            validate_transition("preparing", "lost")
        assert "order_received" in str(exc_info.value)


class TestParseStatus:
    def test_missing_status(self):
        with pytest.raises(UnknownStatusError):
            parse_status(None)

    def test_display_name_falls_back_to_raw_value(self):
        assert display_name("preparing") == "Hazırlanıyor"
        assert display_name("mystery") == "mystery"

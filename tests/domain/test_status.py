"""Unit tests for the status taxonomy, transition table and aggregation rule."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.status import (
    TRANSITIONS,
    OrderStatus,
    Transition,
    aggregate_status,
    is_allowed,
    is_update_target,
)


class TestTransitionTable:

    def test_every_status_has_both_paths(self):
        for status in OrderStatus:
            assert set(TRANSITIONS[status]) == {Transition.UPDATE, Transition.CANCEL}

    def test_update_may_target_anything_but_cancelled(self):
        for current in OrderStatus:
            for target in OrderStatus:
                expected = target is not OrderStatus.CANCELLED
                assert is_allowed(current, target, Transition.UPDATE) == expected

    def test_update_allows_moving_backwards(self):
        assert is_allowed(OrderStatus.DELIVERED, OrderStatus.NEW, Transition.UPDATE)

    @pytest.mark.parametrize(
        "status", [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED]
    )
    def test_cancel_blocked(self, status):
        assert not is_allowed(status, OrderStatus.CANCELLED, Transition.CANCEL)

    @pytest.mark.parametrize(
        "status", [OrderStatus.NEW, OrderStatus.PROCESSING, OrderStatus.PAID]
    )
    def test_cancel_allowed(self, status):
        assert is_allowed(status, OrderStatus.CANCELLED, Transition.CANCEL)

    def test_cancelled_is_not_an_update_target(self):
        assert not is_update_target(OrderStatus.CANCELLED)
        assert is_update_target(OrderStatus.SHIPPED)


class TestAggregateStatus:

    def test_single_distinct_status_wins(self):
        assert aggregate_status([OrderStatus.SHIPPED, OrderStatus.SHIPPED]) is OrderStatus.SHIPPED

    def test_mixed_statuses_mean_processing(self):
        assert (
            aggregate_status([OrderStatus.SHIPPED, OrderStatus.NEW])
            is OrderStatus.PROCESSING
        )

    def test_cancelled_lines_ignored(self):
        assert (
            aggregate_status([OrderStatus.CANCELLED, OrderStatus.DELIVERED])
            is OrderStatus.DELIVERED
        )


class TestParse:

    def test_case_insensitive(self):
        assert OrderStatus.parse(" shipped ") is OrderStatus.SHIPPED

    def test_unknown_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            OrderStatus.parse("LOST")

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for tuition fee computation."""

from decimal import Decimal

import pytest

from src.domains.enrollment import InvalidPaymentConditionError, compute_tuition_fee
from src.models.offering import PaymentCondition


class TestComputeTuitionFee:
    """Tests for compute_tuition_fee()."""

    def test_full_payment_is_single_installment(self) -> None:
        """Test that full payment has one installment equal to the total."""
        fee = compute_tuition_fee(Decimal("12"), Decimal("300"), PaymentCondition.FULL)

        assert fee.condition is PaymentCondition.FULL
        assert fee.total == Decimal("3600.00")
        assert fee.installments == [Decimal("3600.00")]

    def test_three_installments_round_up_and_remainder_last(self) -> None:
        """Test that installments are ceiled and the last takes the remainder."""
        fee = compute_tuition_fee(Decimal("10"), Decimal("301"), "3x")

        assert fee.total == Decimal("3010.00")
        assert fee.installments == [Decimal("1004.00"), Decimal("1004.00"), Decimal("1002.00")]

    def test_two_installments_even_split(self) -> None:
        """Test an evenly divisible total."""
        fee = compute_tuition_fee(Decimal("6"), Decimal("300"), "2x")

        assert fee.installments == [Decimal("900.00"), Decimal("900.00")]

    def test_two_installments_with_cents(self) -> None:
        """Test a total with cents splits to whole first installments."""
        fee = compute_tuition_fee(Decimal("1.5"), Decimal("333.33"), "2x")

        assert fee.total == Decimal("500.00")
        assert fee.installments == [Decimal("250.00"), Decimal("250.00")]

    def test_free_education_has_no_installments(self) -> None:
        """Test that free education is zero with no installments."""
        fee = compute_tuition_fee(Decimal("24"), Decimal("300"), "free")

        assert fee.total == Decimal("0.00")
        assert fee.installments == []

    @pytest.mark.parametrize("condition", ["full", "2x", "3x"])
    @pytest.mark.parametrize(
        ("hours", "rate"),
        [("10", "301"), ("7", "299.99"), ("0.5", "1"), ("3", "0.01"), ("0", "300")],
    )
    def test_installments_sum_to_total(self, hours: str, rate: str, condition: str) -> None:
        """Test that installments always add up exactly and are never negative."""
        fee = compute_tuition_fee(Decimal(hours), Decimal(rate), condition)

        assert sum(fee.installments, Decimal("0")) == fee.total
        assert all(amount >= 0 for amount in fee.installments)
        assert all(amount == amount.quantize(Decimal("0.01")) for amount in fee.installments)

    def test_small_total_leaves_zero_tail(self) -> None:
        """Test that rounding up a tiny total never produces a negative remainder."""
        fee = compute_tuition_fee(Decimal("1"), Decimal("0.50"), "3x")

        assert fee.total == Decimal("0.50")
        assert fee.installments == [Decimal("0.50"), Decimal("0.00"), Decimal("0.00")]

    def test_total_rounds_half_up_to_cents(self) -> None:
        """Test that the total is rounded to two decimals."""
        fee = compute_tuition_fee(Decimal("1"), Decimal("0.125"), "full")

        assert fee.total == Decimal("0.13")

    @pytest.mark.parametrize("condition", ["4x", "", "FULL", "monthly"])
    def test_unknown_condition_raises(self, condition: str) -> None:
        """Test that unknown payment conditions are rejected."""
        with pytest.raises(InvalidPaymentConditionError) as exc_info:
            compute_tuition_fee(Decimal("10"), Decimal("300"), condition)

        assert exc_info.value.kind == "validation_failed"

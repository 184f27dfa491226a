# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tuition fee computation.

The fee is total tuition hours times the per-unit amount. Installment
plans round each installment up to a whole currency unit and the last
installment takes whatever remains, so the installments always add up to
the total exactly. No installment is ever negative.

Example:
    >>> fee = compute_tuition_fee(Decimal("10"), Decimal("301"), PaymentCondition.THREE_INSTALLMENTS)
    >>> fee.total, fee.installments
    (Decimal('3010.00'), [Decimal('1004.00'), Decimal('1004.00'), Decimal('1002.00')])
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from src.core.errors import ValidationFailedError
from src.models.offering import PaymentCondition, TuitionFee

CENTS = Decimal("0.01")
WHOLE = Decimal("1")

INSTALLMENT_COUNTS = {
    PaymentCondition.FULL: 1,
    PaymentCondition.TWO_INSTALLMENTS: 2,
    PaymentCondition.THREE_INSTALLMENTS: 3,
}


class InvalidPaymentConditionError(ValidationFailedError):
    """Raised for an unknown payment condition."""


def compute_tuition_fee(
    total_tuition_hours: Decimal,
    per_unit_amount: Decimal,
    condition: PaymentCondition | str,
) -> TuitionFee:
    """Compute the tuition total and its installments.

    Args:
        total_tuition_hours: Sum of tuition hours of the enrolled courses.
        per_unit_amount: Amount charged per tuition hour.
        condition: "full", "2x", "3x" or "free".

    Returns:
        The total and the installment amounts, all with two decimals.
        Free education has a zero total and no installments.

    Raises:
        InvalidPaymentConditionError: If the condition is unknown.
    """
    try:
        condition = PaymentCondition(condition)
    except ValueError:
        raise InvalidPaymentConditionError(f"Unknown payment condition: {condition}")

    if condition is PaymentCondition.FREE:
        return TuitionFee(condition=condition, total=Decimal("0.00"), installments=[])

    total = (Decimal(total_tuition_hours) * Decimal(per_unit_amount)).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )
    count = INSTALLMENT_COUNTS[condition]
    base = (total / count).quantize(WHOLE, rounding=ROUND_CEILING).quantize(CENTS)

    installments: list[Decimal] = []
    remaining = total
    for _ in range(count - 1):
        amount = min(base, remaining)
        installments.append(amount)
        remaining -= amount
    installments.append(remaining)

    return TuitionFee(condition=condition, total=total, installments=installments)

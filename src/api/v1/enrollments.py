# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment, tuition and payment API endpoints.

This module provides endpoints for enrollment:
- POST /students/{student_id}/enrollments - Enroll in offerings
- GET /students/{student_id}/enrollments - List enrollments
- DELETE /enrollments/{enrollment_id} - Drop an enrollment without payments
- GET /students/{student_id}/tuition - Tuition for a payment condition
- POST /enrollments/{enrollment_id}/payments - Record a payment
- GET /students/{student_id}/payments - List payments

All paths are under /organizations/{organization_id}.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from src.api.dependencies import EnrollmentServiceDep, Membership
from src.models.offering import (
    EnrollmentResponse,
    EnrollRequest,
    PaymentCondition,
    PaymentRequest,
    PaymentResponse,
    TuitionSummaryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/students/{student_id}/enrollments",
    response_model=list[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Enroll student",
    description=(
        "Eligibility follows the student's current status. Any offering the "
        "student is already enrolled in rejects the whole request with 409."
    ),
)
async def enroll(
    student_id: str,
    data: EnrollRequest,
    actor: Membership,
    service: EnrollmentServiceDep,
) -> list[EnrollmentResponse]:
    logger.info(
        "Enrolling student: student=%s, offerings=%d, by=%s",
        student_id,
        len(data.offering_ids),
        actor.user_id,
    )
    return await service.enroll(actor, student_id, data.offering_ids)


@router.get(
    "/students/{student_id}/enrollments",
    response_model=list[EnrollmentResponse],
    summary="List enrollments",
)
async def list_enrollments(
    student_id: str,
    actor: Membership,
    service: EnrollmentServiceDep,
) -> list[EnrollmentResponse]:
    return await service.list_enrollments(actor, student_id)


@router.delete(
    "/enrollments/{enrollment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Drop enrollment",
)
async def drop_enrollment(
    enrollment_id: str,
    actor: Membership,
    service: EnrollmentServiceDep,
) -> None:
    await service.drop_enrollment(actor, enrollment_id)


@router.get(
    "/students/{student_id}/tuition",
    response_model=TuitionSummaryResponse,
    summary="Compute tuition",
)
async def tuition_summary(
    student_id: str,
    actor: Membership,
    service: EnrollmentServiceDep,
    condition: Annotated[PaymentCondition, Query(description="full, 2x, 3x or free")] = PaymentCondition.FULL,
) -> TuitionSummaryResponse:
    return await service.tuition_summary(actor, student_id, condition)


@router.post(
    "/enrollments/{enrollment_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record payment",
)
async def record_payment(
    enrollment_id: str,
    data: PaymentRequest,
    actor: Membership,
    service: EnrollmentServiceDep,
) -> PaymentResponse:
    return await service.record_payment(actor, enrollment_id, data)


@router.get(
    "/students/{student_id}/payments",
    response_model=list[PaymentResponse],
    summary="List payments",
)
async def list_payments(
    student_id: str,
    actor: Membership,
    service: EnrollmentServiceDep,
) -> list[PaymentResponse]:
    return await service.list_payments(actor, student_id)

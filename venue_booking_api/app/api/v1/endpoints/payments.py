"""
Payment endpoints for API v1.

Payments are simulated (see ``PaymentService``); no external provider
is contacted.  ``/process`` books and charges in one call, ``/refund``
reverses a successful charge and the ``/webhook`` routes accept
gateway callbacks that override a payment's status.
"""

import logging
import sqlite3
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from venue_booking_api.app.core.security import ROLE_USER, require_roles
from venue_booking_api.app.schemas.payment import (
    CostBreakdown,
    CostRequest,
    PaymentHistory,
    PaymentMethodList,
    PaymentStatus,
    PaymentStatusRequest,
    PaymentStatusResponse,
    ProcessPaymentRequest,
    ProcessPaymentResponse,
    RefundRequest,
    RefundResponse,
    RefundWebhookPayload,
    WebhookPayload,
    WebhookResponse,
)
from venue_booking_api.app.services.payment_service import PaymentService


logger = logging.getLogger(__name__)

router = APIRouter()

require_customer = require_roles(ROLE_USER)


@router.get("/methods", response_model=PaymentMethodList)
async def list_methods() -> PaymentMethodList:
    return PaymentMethodList(methods=await PaymentService.list_methods())


@router.post("/calculate-cost", response_model=CostBreakdown)
async def calculate_cost(request: CostRequest) -> CostBreakdown:
    """Quote venue rental, catering, tax and service fee for a booking."""
    return await PaymentService.calculate_cost(request)


@router.post(
    "/process",
    response_model=ProcessPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ProcessPaymentResponse, "description": "Payment declined"}},
)
async def process_payment(
    request: ProcessPaymentRequest,
    current_user: Dict[str, Any] = Depends(require_customer),
):
    """Book the venue and charge the customer.

    A declined charge still creates the (cancelled) event and the failed
    payment; both are returned with status 400 and ``success: false``.
    """
    result = await PaymentService.process_payment(current_user["user_id"], request)
    if not result.success:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=jsonable_encoder(result))
    return result


@router.post("/status", response_model=PaymentStatusResponse)
async def payment_status(request: PaymentStatusRequest) -> PaymentStatusResponse:
    return await PaymentService.get_status(request.transaction_id)


@router.post("/refund", response_model=RefundResponse)
async def refund_payment(
    request: RefundRequest,
    current_user: Dict[str, Any] = Depends(require_customer),
) -> RefundResponse:
    return await PaymentService.refund(current_user["user_id"], request)


@router.get("/history", response_model=PaymentHistory)
async def payment_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[PaymentStatus] = Query(None),
    current_user: Dict[str, Any] = Depends(require_customer),
) -> PaymentHistory:
    return await PaymentService.history(current_user["user_id"], page=page, limit=limit, status=status)


@router.post("/webhook", response_model=WebhookResponse)
async def payment_webhook(payload: WebhookPayload) -> WebhookResponse:
    """Gateway callback for a payment status change.

    Signature and lookup failures are answered with their error status.
    Storage failures are reported with 200 and ``success: false`` so
    the gateway does not keep retrying.
    """
    try:
        return await PaymentService.handle_payment_webhook(payload)
    except sqlite3.Error as exc:
        logger.error("Payment webhook for %s failed: %s", payload.transaction_id, exc)
        return WebhookResponse(
            success=False,
            message="Webhook processing failed",
            transaction_id=payload.transaction_id,
            error=str(exc),
        )


@router.post("/webhook/refund", response_model=WebhookResponse)
async def refund_webhook(payload: RefundWebhookPayload) -> WebhookResponse:
    try:
        return await PaymentService.handle_refund_webhook(payload)
    except sqlite3.Error as exc:
        logger.error("Refund webhook for %s failed: %s", payload.transaction_id, exc)
        return WebhookResponse(
            success=False,
            message="Refund webhook processing failed",
            transaction_id=payload.transaction_id,
            error=str(exc),
        )

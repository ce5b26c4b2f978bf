"""
Business logic for payments.

There is no real payment provider behind this service.  Charges and
refunds are simulated: the gateway "thinks" for a configurable delay
and then succeeds with a configurable probability (see
``Settings.payment_success_rate`` and ``Settings.refund_success_rate``).
Every attempt is recorded in the ``payments`` table with its outcome
and a generated transaction id of the form
``<PREFIX><epoch millis><6 random characters>``.

The payment outcome drives the booking: a successful charge confirms
the event, a failed one cancels it and a successful refund cancels it
as well.  Gateway webhooks can later override a payment's status.
"""

import asyncio
import hmac
import logging
import random
import string
import time
from typing import Any, Dict, List, Optional, Tuple

from ..core.config import settings
from ..core.db import utcnow
from ..core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from ..core.security import sign_webhook_payload
from ..repositories.event_repository import EventRepository
from ..repositories.payment_repository import PaymentRepository
from ..schemas.common import Pagination
from ..schemas.event import EventRead
from ..schemas.payment import (
    CostBreakdown,
    CostRequest,
    PaymentHistory,
    PaymentHistoryItem,
    PaymentMethodInfo,
    PaymentRead,
    PaymentStatusResponse,
    PaymentSummary,
    ProcessPaymentRequest,
    ProcessPaymentResponse,
    RefundRecord,
    RefundRequest,
    RefundResponse,
    RefundWebhookPayload,
    WebhookPayload,
    WebhookResponse,
)
from .cost_calculator import calculate_cost
from .event_service import EventService


logger = logging.getLogger(__name__)


PAYMENT_METHODS: List[PaymentMethodInfo] = [
    PaymentMethodInfo(id="card", name="Credit/Debit Card", description="Pay securely with your credit or debit card"),
    PaymentMethodInfo(id="bkash", name="bKash", description="Pay using bKash mobile financial service"),
    PaymentMethodInfo(id="nagad", name="Nagad", description="Pay using Nagad mobile financial service"),
    PaymentMethodInfo(id="rocket", name="Rocket", description="Pay using Rocket mobile financial service"),
]

TRANSACTION_PREFIXES = {
    "card": "CARD",
    "bkash": "BKS",
    "nagad": "NGD",
    "rocket": "RKT",
    "bank_transfer": "BANK",
}

_TRANSACTION_ALPHABET = string.ascii_uppercase + string.digits

PAYMENT_SUCCESS_MESSAGE = "Payment processed successfully. Your event booking is confirmed!"
PAYMENT_FAILURE_MESSAGE = "Payment processing failed. Please try again or use a different payment method."
REFUND_SUCCESS_MESSAGE = "Refund processed successfully. Amount will be credited within 3-5 business days."
REFUND_FAILURE_MESSAGE = "Refund processing failed. Please contact support for assistance."

# Event status mirrored from a payment status reported by the gateway.
_EVENT_STATUS_FOR_PAYMENT = {
    "success": "confirmed",
    "failed": "cancelled",
}


def generate_transaction_id(method: str) -> str:
    """Build a transaction id; unknown methods (including refunds) use ``PAY``."""
    prefix = TRANSACTION_PREFIXES.get(method, "PAY")
    suffix = "".join(random.choices(_TRANSACTION_ALPHABET, k=6))
    return f"{prefix}{int(time.time() * 1000)}{suffix}"


class PaymentService:
    """Simulated payment gateway, refunds, history and webhooks."""

    @classmethod
    async def list_methods(cls) -> List[PaymentMethodInfo]:
        return list(PAYMENT_METHODS)

    @classmethod
    async def calculate_cost(cls, data: CostRequest) -> CostBreakdown:
        """Quote a booking without checking availability or storing anything."""
        venue = EventService.load_venue(data.venue_id)
        meal = EventService.load_meal(data.meal_id)
        EventService.check_guests(venue, meal, data.people_count)
        cost = calculate_cost(venue, meal, data.people_count, data.start_time, data.end_time)
        logger.info("Quoted %.2f for venue %s (meal %s)", cost.total, data.venue_id, data.meal_id)
        return cost

    @classmethod
    async def _simulate_charge(cls, event_id: int, amount: float, method: str) -> Tuple[bool, Dict[str, Any]]:
        await asyncio.sleep(settings.payment_simulation_delay)
        transaction_id = generate_transaction_id(method)
        success = random.random() < settings.payment_success_rate
        payment = PaymentRepository.create(
            event_id=event_id,
            amount=amount,
            method=method,
            status="success" if success else "failed",
            transaction_id=transaction_id,
        )
        if success:
            logger.info("Payment %s succeeded for event %s (%s)", payment["id"], event_id, transaction_id)
        else:
            logger.warning("Payment %s failed for event %s (%s)", payment["id"], event_id, transaction_id)
        return success, payment

    @classmethod
    async def process_payment(cls, user_id: int, data: ProcessPaymentRequest) -> ProcessPaymentResponse:
        """Book an event and charge for it in one step.

        The booking is validated exactly like ``EventService.create_event``
        and stored as ``pending``.  The simulated charge then confirms or
        cancels it.  The returned response has ``success`` set
        accordingly; a failed charge is not raised as an error so the
        caller still receives the stored event and payment.
        """
        logger.info("Processing %s payment for user %s at venue %s", data.payment_method, user_id, data.venue_id)
        _, _, cost = EventService.prepare_booking(
            data.venue_id, data.meal_id, data.people_count, data.start_time, data.end_time
        )
        event = EventService.store_event(
            user_id,
            data.venue_id,
            data.meal_id,
            data.event_type,
            data.people_count,
            data.start_time,
            data.end_time,
            cost.total,
        )
        success, payment = await cls._simulate_charge(event["id"], cost.total, data.payment_method)
        event = EventRepository.update_status(event["id"], "confirmed" if success else "cancelled")
        return ProcessPaymentResponse(
            success=success,
            message=PAYMENT_SUCCESS_MESSAGE if success else PAYMENT_FAILURE_MESSAGE,
            event=EventRead(**event),
            payment=PaymentRead(**payment),
            transaction_id=payment["transaction_id"],
            cost_breakdown=cost,
        )

    @classmethod
    async def get_status(cls, transaction_id: str) -> PaymentStatusResponse:
        payment = PaymentRepository.find_by_transaction_id(transaction_id)
        if not payment:
            raise NotFoundError("Payment not found")
        return PaymentStatusResponse(
            payment_id=payment["id"],
            event_id=payment["event_id"],
            status=payment["status"],
            amount=payment["amount"],
            method=payment["method"],
            transaction_id=payment["transaction_id"],
            created_at=payment["created_at"],
            updated_at=payment["updated_at"],
        )

    @classmethod
    async def refund(cls, user_id: int, data: RefundRequest) -> RefundResponse:
        """Refund one of the caller's successful payments.

        Raises ``NotFoundError`` for unknown payments, ``ForbiddenError``
        for payments of other customers, ``BadRequestError`` when the
        payment is not in ``success`` state or the simulated refund is
        declined.  A granted refund cancels the event.
        """
        payment = PaymentRepository.find_by_id(data.payment_id)
        if not payment:
            raise NotFoundError("Payment not found")
        if payment["user_id"] != user_id:
            logger.warning("User %s tried to refund payment %s", user_id, data.payment_id)
            raise ForbiddenError("You can only refund your own payments")
        if payment["status"] != "success":
            raise BadRequestError("Only successful payments can be refunded")

        logger.info("Processing refund for payment %s: %s", data.payment_id, data.reason)
        await asyncio.sleep(settings.refund_simulation_delay)
        if random.random() >= settings.refund_success_rate:
            logger.warning("Refund declined for payment %s", data.payment_id)
            raise BadRequestError(REFUND_FAILURE_MESSAGE)

        PaymentRepository.update_status(payment["id"], "refunded")
        EventRepository.update_status(payment["event_id"], "cancelled")
        refund_transaction_id = generate_transaction_id("refund")
        logger.info("Refunded payment %s (%s)", payment["id"], refund_transaction_id)
        return RefundResponse(
            success=True,
            message=REFUND_SUCCESS_MESSAGE,
            refund=RefundRecord(
                id=f"REF_{payment['id']}",
                payment_id=payment["id"],
                amount=payment["amount"],
                reason=data.reason,
                status="success",
                transaction_id=refund_transaction_id,
                processed_at=utcnow(),
            ),
        )

    @classmethod
    async def history(cls, user_id: int, page: int = 1, limit: int = 10, status: Optional[str] = None) -> PaymentHistory:
        rows, total = PaymentRepository.list_by_user(user_id, page, limit, status)
        summary = PaymentRepository.summary_by_user(user_id)
        summary["total_amount"] = round(summary["total_amount"], 2)
        return PaymentHistory(
            payments=[PaymentHistoryItem(**r) for r in rows],
            pagination=Pagination.build(page, limit, total),
            summary=PaymentSummary(**summary),
        )

    # ------------------------------------------------------------------
    # Gateway webhooks
    # ------------------------------------------------------------------
    @classmethod
    def verify_signature(cls, transaction_id: str, status: str, signature: Optional[str]) -> None:
        """Reject unsigned callbacks, and mis-signed ones when a secret is configured."""
        if not signature:
            raise UnauthorizedError("Invalid webhook signature")
        if settings.webhook_secret:
            expected = sign_webhook_payload(transaction_id, status, settings.webhook_secret)
            if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
                raise UnauthorizedError("Invalid webhook signature")

    @classmethod
    def _apply_event_status(cls, event_id: int, status: str) -> bool:
        """Move the paid event to ``status``; return ``False`` if it had to stay cancelled.

        A cancelled event is only revived while its venue slot is still free.
        """
        event = EventRepository.find_by_id(event_id)
        if event["status"] == "cancelled" and status != "cancelled":
            try:
                EventService.ensure_revivable(event)
            except ConflictError:
                logger.warning("Event %s stays cancelled, its slot was booked meanwhile", event_id)
                return False
        EventRepository.update_status(event_id, status)
        return True

    @classmethod
    async def handle_payment_webhook(cls, payload: WebhookPayload) -> WebhookResponse:
        logger.info("Received payment webhook for %s: %s", payload.transaction_id, payload.status)
        try:
            cls.verify_signature(payload.transaction_id, payload.status, payload.signature)
        except UnauthorizedError:
            logger.warning("Invalid webhook signature for %s", payload.transaction_id)
            raise
        payment = PaymentRepository.find_by_transaction_id(payload.transaction_id)
        if not payment:
            logger.warning("Payment not found for webhook %s", payload.transaction_id)
            raise NotFoundError("Payment not found")
        message = "Webhook processed successfully"
        if payment["status"] != payload.status:
            PaymentRepository.update_status(payment["id"], payload.status)
            event_status = _EVENT_STATUS_FOR_PAYMENT.get(payload.status)
            if event_status and not cls._apply_event_status(payment["event_id"], event_status):
                message = "Webhook processed, the event slot is no longer available"
            logger.info(
                "Payment %s status %s -> %s via webhook",
                payment["id"], payment["status"], payload.status,
            )
        return WebhookResponse(
            success=True,
            message=message,
            transaction_id=payload.transaction_id,
        )

    @classmethod
    async def handle_refund_webhook(cls, payload: RefundWebhookPayload) -> WebhookResponse:
        logger.info(
            "Received refund webhook %s for %s: %s",
            payload.transaction_id, payload.original_transaction_id, payload.status,
        )
        try:
            cls.verify_signature(payload.transaction_id, payload.status, payload.signature)
        except UnauthorizedError:
            logger.warning("Invalid refund webhook signature for %s", payload.transaction_id)
            raise
        payment = PaymentRepository.find_by_transaction_id(payload.original_transaction_id)
        if not payment:
            logger.warning("Original payment not found for refund webhook %s", payload.original_transaction_id)
            raise NotFoundError("Original payment not found")
        if payload.status == "success":
            PaymentRepository.update_status(payment["id"], "refunded")
            EventRepository.update_status(payment["event_id"], "cancelled")
            logger.info("Payment %s refunded via webhook %s", payment["id"], payload.transaction_id)
        return WebhookResponse(
            success=True,
            message="Refund webhook processed successfully",
            transaction_id=payload.transaction_id,
        )

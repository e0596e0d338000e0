"""
Payout and commission services.

Balances are derived on demand from bookings and withdrawal requests; no
running ledger is stored. Every administrative decision on a withdrawal
changes the request and writes its audit row in one transaction. The agent
is notified afterwards as a best-effort side effect.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Count, Sum  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import status  # type: ignore

from apps.audit.services import record_audit
from apps.bookings.models import Booking
from apps.notifications.models import Notification
from apps.notifications.services import notify, queue_email
from apps.users.models import Agent
from shared.application.side_effects import best_effort
from shared.infrastructure.exceptions import ServiceError

from .models import CommissionTier, WithdrawalRequest

logger = logging.getLogger(__name__)

OUTSTANDING_STATUSES = (
    WithdrawalRequest.Status.PENDING,
    WithdrawalRequest.Status.APPROVED,
    WithdrawalRequest.Status.PROCESSING,
)
BLOCKING_STATUSES = (
    WithdrawalRequest.Status.PENDING,
    WithdrawalRequest.Status.PROCESSING,
)
IN_FLIGHT_BOOKING_STATUSES = (
    Booking.Status.CONFIRMED,
    Booking.Status.PAID,
    Booking.Status.IN_PROGRESS,
)
TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


class WithdrawalError(ServiceError):
    """Raised when a withdrawal request or decision breaks a payout rule."""


def month_start(now=None):
    now = timezone.localtime(now or timezone.now())
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _total(queryset, field: str) -> Decimal:
    return queryset.aggregate(total=Sum(field))["total"] or ZERO


def _paid_bookings(agent: Agent):
    return Booking.objects.filter(agent=agent, payment_status=Booking.PaymentStatus.COMPLETED)


def available_balance(agent: Agent, exclude_id: Optional[int] = None) -> Decimal:
    """Earnings from paid bookings minus completed and outstanding withdrawals."""
    earnings = _total(_paid_bookings(agent), "agent_earnings")
    withdrawals = WithdrawalRequest.objects.filter(agent=agent)
    if exclude_id is not None:
        withdrawals = withdrawals.exclude(pk=exclude_id)
    withdrawn = _total(withdrawals.filter(status=WithdrawalRequest.Status.COMPLETED), "amount")
    outstanding = _total(withdrawals.filter(status__in=OUTSTANDING_STATUSES), "amount")
    return earnings - withdrawn - outstanding


def agent_balance(agent: Agent) -> dict[str, Any]:
    paid = _paid_bookings(agent)
    withdrawals = WithdrawalRequest.objects.filter(agent=agent)
    outstanding = withdrawals.filter(status__in=OUTSTANDING_STATUSES)
    completed = withdrawals.filter(status=WithdrawalRequest.Status.COMPLETED)
    in_flight = paid.filter(status__in=IN_FLIGHT_BOOKING_STATUSES)

    total_earnings = _total(paid, "agent_earnings")
    total_withdrawn = _total(completed, "amount")
    pending_withdrawals = _total(outstanding, "amount")

    def money(value: Decimal) -> Decimal:
        return value.quantize(TWO_PLACES)

    return {
        "total_earnings": money(total_earnings),
        "monthly_earnings": money(_total(paid.filter(created_at__gte=month_start()), "agent_earnings")),
        "available_balance": money(total_earnings - total_withdrawn - pending_withdrawals),
        "pending_withdrawals": money(pending_withdrawals),
        "total_withdrawn": money(total_withdrawn),
        "pending_earnings": money(_total(in_flight, "agent_earnings")),
        "completed_bookings": paid.count(),
        "pending_bookings": in_flight.count(),
        "pending_withdrawal_count": outstanding.count(),
    }


def minimum_withdrawal() -> Decimal:
    if settings.PAYOUT_DEV_MODE:
        return Decimal("1")
    return Decimal(settings.MIN_WITHDRAWAL_AMOUNT)


def ensure_can_withdraw(agent: Agent) -> None:
    if agent.status != Agent.Status.ACTIVE:
        raise WithdrawalError(
            "Agent account must be active to request withdrawals",
            status_code=status.HTTP_403_FORBIDDEN,
        )


def request_withdrawal(agent: Agent, data: dict[str, Any]) -> WithdrawalRequest:
    """
    Create a PENDING withdrawal for ``agent``.

    ``data`` is the validated payload of ``WithdrawalCreateSerializer``;
    phone and bank details are already checked there.
    """
    ensure_can_withdraw(agent)

    amount = Decimal(data["amount"])
    minimum = minimum_withdrawal()
    if amount < minimum:
        raise WithdrawalError(f"Minimum withdrawal amount is ${minimum}")

    with transaction.atomic():
        # Serialize concurrent requests from the same agent.
        Agent.objects.select_for_update().filter(pk=agent.pk).first()

        available = available_balance(agent)
        if amount > available:
            raise WithdrawalError(f"Insufficient balance. Available: ${available.quantize(TWO_PLACES)}")
        if WithdrawalRequest.objects.filter(agent=agent, status__in=BLOCKING_STATUSES).exists():
            raise WithdrawalError(
                "You already have a pending withdrawal request. Please wait for it to be processed."
            )

        withdrawal = WithdrawalRequest.objects.create(
            agent=agent,
            amount=amount,
            currency=data.get("currency", WithdrawalRequest.Currency.USD),
            method=data["method"],
            mpesa_phone=data.get("mpesa_phone", "") or "",
            bank_details=data.get("bank_details") or {},
        )
    logger.info(f"Withdrawal {withdrawal.pk} of {amount} requested by agent {agent.pk}")
    return withdrawal


def _locked_withdrawal(withdrawal_id: Any) -> WithdrawalRequest:
    try:
        return (
            WithdrawalRequest.objects.select_for_update()
            .select_related("agent", "agent__user")
            .get(pk=withdrawal_id)
        )
    except WithdrawalRequest.DoesNotExist:
        raise WithdrawalError("Withdrawal not found", status_code=status.HTTP_404_NOT_FOUND)


def _audit_metadata(withdrawal: WithdrawalRequest, **extra: Any) -> dict[str, Any]:
    metadata = {
        "agent_id": withdrawal.agent_id,
        "agent_name": withdrawal.agent.business_name,
        "amount": str(withdrawal.amount),
        "currency": withdrawal.currency,
        "method": withdrawal.method,
    }
    metadata.update(extra)
    return metadata


def _tell_agent(withdrawal: WithdrawalRequest, title: str, message: str) -> None:
    user = withdrawal.agent.user
    best_effort(
        notify,
        user,
        Notification.Type.WITHDRAWAL,
        title,
        message,
        link="/agent/earnings",
        description="withdrawal notification",
    )
    best_effort(
        queue_email,
        user.email,
        f"SafariPlus: {title}",
        message,
        description="withdrawal email",
    )


def approve_withdrawal(withdrawal_id: Any, admin, notes: str = "", request=None) -> WithdrawalRequest:
    with transaction.atomic():
        withdrawal = _locked_withdrawal(withdrawal_id)
        if withdrawal.status != WithdrawalRequest.Status.PENDING:
            raise WithdrawalError(f"Cannot approve withdrawal with status: {withdrawal.status}")

        available = available_balance(withdrawal.agent, exclude_id=withdrawal.pk)
        if withdrawal.amount > available:
            raise WithdrawalError(
                f"Agent has insufficient balance. Available: ${available.quantize(TWO_PLACES)}"
            )

        withdrawal.status = WithdrawalRequest.Status.APPROVED
        withdrawal.processed_by = admin
        withdrawal.processed_at = timezone.now()
        if notes:
            withdrawal.notes = notes
        withdrawal.save()
        record_audit(
            admin,
            "withdrawal_approved",
            "withdrawal",
            withdrawal.pk,
            _audit_metadata(withdrawal, notes=notes),
            request=request,
        )

    logger.info(f"Withdrawal {withdrawal.pk} approved by admin {admin.pk}")
    _tell_agent(
        withdrawal,
        "Withdrawal approved",
        f"Your withdrawal of {withdrawal.amount} {withdrawal.currency} has been approved "
        f"and will be paid out shortly.",
    )
    return withdrawal


def process_withdrawal(
    withdrawal_id: Any,
    admin,
    transaction_ref: str,
    notes: str = "",
    request=None,
) -> WithdrawalRequest:
    if not transaction_ref:
        raise WithdrawalError("Transaction reference is required")

    with transaction.atomic():
        withdrawal = _locked_withdrawal(withdrawal_id)
        if withdrawal.status not in (
            WithdrawalRequest.Status.APPROVED,
            WithdrawalRequest.Status.PROCESSING,
        ):
            raise WithdrawalError(f"Cannot process withdrawal with status: {withdrawal.status}")

        withdrawal.status = WithdrawalRequest.Status.COMPLETED
        withdrawal.transaction_ref = transaction_ref
        withdrawal.processed_by = admin
        withdrawal.processed_at = timezone.now()
        if notes:
            withdrawal.notes = notes
        withdrawal.save()
        record_audit(
            admin,
            "withdrawal_processed",
            "withdrawal",
            withdrawal.pk,
            _audit_metadata(withdrawal, transaction_ref=transaction_ref),
            request=request,
        )

    logger.info(f"Withdrawal {withdrawal.pk} paid out by admin {admin.pk} ({transaction_ref})")
    _tell_agent(
        withdrawal,
        "Withdrawal completed",
        f"{withdrawal.amount} {withdrawal.currency} has been sent. Reference: {transaction_ref}.",
    )
    return withdrawal


def reject_withdrawal(withdrawal_id: Any, admin, reason: str, request=None) -> WithdrawalRequest:
    with transaction.atomic():
        withdrawal = _locked_withdrawal(withdrawal_id)
        if withdrawal.status != WithdrawalRequest.Status.PENDING:
            raise WithdrawalError(f"Cannot reject withdrawal with status: {withdrawal.status}")

        withdrawal.status = WithdrawalRequest.Status.REJECTED
        withdrawal.rejection_reason = reason
        withdrawal.processed_by = admin
        withdrawal.processed_at = timezone.now()
        withdrawal.save()
        record_audit(
            admin,
            "withdrawal_rejected",
            "withdrawal",
            withdrawal.pk,
            _audit_metadata(withdrawal, reason=reason),
            request=request,
        )

    logger.info(f"Withdrawal {withdrawal.pk} rejected by admin {admin.pk}")
    _tell_agent(
        withdrawal,
        "Withdrawal rejected",
        f"Your withdrawal of {withdrawal.amount} {withdrawal.currency} was rejected: {reason}",
    )
    return withdrawal


def classify_agent(
    bookings_count: int,
    revenue: Decimal,
    tiers: Iterable[CommissionTier],
) -> Optional[CommissionTier]:
    """
    Return the highest active tier whose thresholds ``bookings_count`` and
    ``revenue`` both meet. A null ``min_revenue`` only checks bookings.
    """
    best: Optional[CommissionTier] = None
    for tier in tiers:
        if not tier.is_active or bookings_count < tier.min_bookings:
            continue
        if tier.min_revenue is not None and revenue < tier.min_revenue:
            continue
        if best is None or tier.min_bookings > best.min_bookings:
            best = tier
    return best


def agent_tier(agent: Agent) -> Optional[CommissionTier]:
    paid = _paid_bookings(agent).aggregate(count=Count("id"), revenue=Sum("total_amount"))
    return classify_agent(
        paid["count"] or 0,
        paid["revenue"] or ZERO,
        CommissionTier.objects.filter(is_active=True),
    )


def update_commission_rate(agent: Agent, rate: Decimal, admin, reason: str = "", request=None) -> Decimal:
    """Set ``agent.commission_rate`` and return the previous rate."""
    with transaction.atomic():
        previous = agent.commission_rate
        agent.commission_rate = rate
        agent.save(update_fields=["commission_rate", "updated_at"])
        record_audit(
            admin,
            "commission_rate_updated",
            "agent",
            agent.pk,
            {
                "agent_name": agent.business_name,
                "previous_rate": str(previous),
                "new_rate": str(rate),
                "reason": reason,
            },
            request=request,
        )
    logger.info(f"Commission for agent {agent.pk} changed {previous} -> {rate} by admin {admin.pk}")
    return previous

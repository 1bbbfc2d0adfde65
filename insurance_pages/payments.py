from collections.abc import Iterable
from dataclasses import dataclass

from insurance_common import flags as app_flags
from insurance_features import FlagQueries
from insurance_pages.api import InsuranceApi
from insurance_pages.models import Payment


@dataclass
class PaymentSummary:
    total_payments: int = 0
    total_amount: float = 0.0
    completed_amount: float = 0.0
    pending_amount: float = 0.0
    premium_payments: float = 0.0


@dataclass
class PaymentsView:
    payments: list[Payment]
    filtered: list[Payment]
    summary: PaymentSummary
    filters_enabled: bool

    @property
    def empty_title(self) -> str | None:
        if self.filtered:
            return None
        return "No Payments Yet" if not self.payments else "No Payments Found"


def filter_payments(
    payments: Iterable[Payment], payment_type: str = "", status: str = ""
) -> list[Payment]:
    return [
        payment
        for payment in payments
        if (not payment_type or payment.payment_type == payment_type)
        and (not status or payment.status == status)
    ]


def summarize_payments(payments: Iterable[Payment]) -> PaymentSummary:
    summary = PaymentSummary()
    for payment in payments:
        summary.total_payments += 1
        summary.total_amount += payment.amount
        if payment.status == "completed":
            summary.completed_amount += payment.amount
        if payment.status == "pending":
            summary.pending_amount += payment.amount
        if payment.payment_type == "premium":
            summary.premium_payments += payment.amount
    return summary


async def load_payments_view(
    api: InsuranceApi,
    payment_type: str = "",
    status: str = "",
    flags: FlagQueries | None = None,
) -> PaymentsView:
    flags = flags or app_flags.queries
    payments = await api.get_payments()
    filters_enabled = flags.is_payments_filters_enabled()
    filtered = (
        filter_payments(payments, payment_type, status)
        if filters_enabled
        else list(payments)
    )
    return PaymentsView(
        payments=payments,
        filtered=filtered,
        summary=summarize_payments(payments),
        filters_enabled=filters_enabled,
    )

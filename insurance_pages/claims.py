from collections.abc import Iterable
from dataclasses import dataclass

from insurance_common import flags as app_flags
from insurance_features import FlagQueries
from insurance_pages.api import InsuranceApi
from insurance_pages.models import Claim

PENDING_STATUSES = frozenset({"submitted", "under_review"})
APPROVED_STATUSES = frozenset({"approved", "paid"})


@dataclass
class ClaimSummary:
    total_claims: int = 0
    total_amount: float = 0.0
    pending_claims: int = 0
    approved_amount: float = 0.0


@dataclass
class ClaimsView:
    claims: list[Claim]
    filtered: list[Claim]
    summary: ClaimSummary
    filters_enabled: bool

    @property
    def empty_title(self) -> str | None:
        if self.filtered:
            return None
        return "No Claims Filed" if not self.claims else "No Claims Found"


def filter_claims(claims: Iterable[Claim], search: str = "", status: str = "") -> list[Claim]:
    """Match ``search`` against number, description and type; ``status`` exactly."""
    query = search.lower()
    return [
        claim
        for claim in claims
        if (
            query in claim.claim_number.lower()
            or query in claim.description.lower()
            or query in claim.claim_type.lower()
        )
        and (not status or claim.status == status)
    ]


def summarize_claims(claims: Iterable[Claim]) -> ClaimSummary:
    summary = ClaimSummary()
    for claim in claims:
        summary.total_claims += 1
        summary.total_amount += claim.amount
        if claim.status in PENDING_STATUSES:
            summary.pending_claims += 1
        if claim.status in APPROVED_STATUSES:
            summary.approved_amount += claim.amount
    return summary


async def load_claims_view(
    api: InsuranceApi,
    search: str = "",
    status: str = "",
    flags: FlagQueries | None = None,
) -> ClaimsView:
    flags = flags or app_flags.queries
    claims = await api.get_claims()
    filters_enabled = flags.is_claims_filters_enabled()
    filtered = filter_claims(claims, search, status) if filters_enabled else list(claims)
    return ClaimsView(
        claims=claims,
        filtered=filtered,
        summary=summarize_claims(claims),
        filters_enabled=filters_enabled,
    )

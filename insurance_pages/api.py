from typing import Protocol

from insurance_pages.models import Claim, Payment


class InsuranceApi(Protocol):
    """Backend client used by the pages. Implemented outside this package."""

    async def get_claims(self) -> list[Claim]: ...

    async def get_payments(self) -> list[Payment]: ...

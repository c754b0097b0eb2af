from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, Field

from manpoweradmin.records.payment_schema import PAYMENT_STATUSES, ManpowerPayment
from manpoweradmin.records.submission_schema import SUBMISSION_STATUSES, ManpowerSubmission
from manpoweradmin.services.format_service import coerce_amount


class SubmissionStats(BaseModel):
    """
    Description: Dashboard tiles for the submissions screen.
    Layer: L2
    Input: full (unfiltered) submission list
    Output: total, per-status counts, verified count, distinct destination countries
    """

    model_config = ConfigDict(extra="forbid")

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    verified: int = 0
    countries: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)


class PaymentStats(BaseModel):
    """
    Description: Dashboard tiles for the payments screen.
    Layer: L2
    Input: full (unfiltered) payment list
    Output: total, per-status counts, verified count, summed amount
    """

    model_config = ConfigDict(extra="forbid")

    total: int = 0
    pending: int = 0
    processing: int = 0
    approved: int = 0
    completed: int = 0
    rejected: int = 0
    verified: int = 0
    total_amount: float = 0.0


def sum_amounts(amounts: Iterable[object]) -> float:
    """Missing, unparseable and non-finite amounts count as zero."""
    total = 0.0
    for a in amounts:
        n = coerce_amount(a)
        if n is not None:
            total += n
    return total


def compute_submission_stats(submissions: Iterable[ManpowerSubmission]) -> SubmissionStats:
    items: List[ManpowerSubmission] = list(submissions)
    counts = Counter(s.status for s in items)
    by_status = {status: counts.get(status, 0) for status in SUBMISSION_STATUSES}
    countries = {s.destination_country for s in items if s.destination_country}
    return SubmissionStats(
        total=len(items),
        pending=by_status["pending"],
        approved=by_status["approved"],
        rejected=by_status["rejected"],
        verified=sum(1 for s in items if s.verified),
        countries=len(countries),
        by_status=by_status,
    )


def compute_payment_stats(payments: Iterable[ManpowerPayment]) -> PaymentStats:
    items: List[ManpowerPayment] = list(payments)
    counts = Counter(p.status for p in items)
    by_status = {status: counts.get(status, 0) for status in PAYMENT_STATUSES}
    return PaymentStats(
        total=len(items),
        verified=sum(1 for p in items if p.verified),
        total_amount=sum_amounts(p.amount for p in items),
        **by_status,
    )

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel

from manpoweradmin.records.payment_schema import PAYMENT_SEARCH_FIELDS, ManpowerPayment
from manpoweradmin.records.submission_schema import SUBMISSION_SEARCH_FIELDS, ManpowerSubmission


ALL = "all"

R = TypeVar("R", bound=BaseModel)


def matches_text(record: BaseModel, term: Optional[str], fields: Sequence[str]) -> bool:
    """Case-insensitive substring match on ANY of `fields`; an empty term always matches."""
    needle = (term or "").lower()
    if not needle.strip():
        return True
    for name in fields:
        value = getattr(record, name, None)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def matches_equals(record: BaseModel, field: str, wanted: Optional[str]) -> bool:
    if wanted is None or wanted == ALL:
        return True
    return getattr(record, field, None) == wanted


def filter_records(
    records: Iterable[R],
    *,
    search_term: Optional[str],
    search_fields: Sequence[str],
    equals: Mapping[str, Optional[str]],
) -> List[R]:
    """
    Description: Generic filter engine shared by both review screens.
    Layer: L2
    Input: records + free-text term + {field: wanted value or 'all'}
    Output: order-preserving subsequence passing the text predicate AND every equality predicate
    """
    out: List[R] = []
    for record in records:
        if not matches_text(record, search_term, search_fields):
            continue
        if all(matches_equals(record, field, wanted) for field, wanted in equals.items()):
            out.append(record)
    return out


def filter_submissions(
    submissions: Iterable[ManpowerSubmission],
    *,
    search_term: str = "",
    status: str = ALL,
    destination_country: str = ALL,
    service_type: str = ALL,
) -> List[ManpowerSubmission]:
    return filter_records(
        submissions,
        search_term=search_term,
        search_fields=SUBMISSION_SEARCH_FIELDS,
        equals={
            "status": status,
            "destination_country": destination_country,
            "service_type": service_type,
        },
    )


def filter_payments(
    payments: Iterable[ManpowerPayment],
    *,
    search_term: str = "",
    status: str = ALL,
    service_category: str = ALL,
) -> List[ManpowerPayment]:
    return filter_records(
        payments,
        search_term=search_term,
        search_fields=PAYMENT_SEARCH_FIELDS,
        equals={"status": status, "service_category": service_category},
    )

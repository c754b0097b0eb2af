from __future__ import annotations

from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from manpoweradmin.records.payment_schema import ManpowerPayment
from manpoweradmin.records.submission_schema import ManpowerSubmission
from manpoweradmin.services.filter_service import ALL

R = TypeVar("R", bound=BaseModel)


def utc_now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


class SubmissionFilters(BaseModel):
    """Description: Search box + filter selects of the submissions screen.
    Layer: L1
    Input: UI widgets
    Output: arguments for filter_submissions
    """

    search_term: str = ""
    status: str = ALL
    destination_country: str = ALL
    service_type: str = ALL


class PaymentFilters(BaseModel):
    """Description: Search box + filter selects of the payments screen.
    Layer: L1
    Input: UI widgets
    Output: arguments for filter_payments
    """

    search_term: str = ""
    status: str = ALL
    service_category: str = ALL


class ReviewState(BaseModel, Generic[R]):
    """Description: Explicit view state for one review screen.
    Layer: L1
    Input: loader results + mutator patches
    Output: record list the filter engine and aggregator derive from
    """

    records: List[R] = Field(default_factory=list)
    loading: bool = False
    loaded_at_utc: Optional[str] = None
    # ids of documents dropped by the last load because they failed validation
    skipped_ids: List[str] = Field(default_factory=list)

    def find(self, record_id: str) -> Optional[R]:
        for r in self.records:
            if getattr(r, "id", None) == record_id:
                return r
        return None

    def replace(self, record: R) -> None:
        rid = getattr(record, "id", None)
        self.records = [record if getattr(r, "id", None) == rid else r for r in self.records]

    def remove(self, record_id: str) -> None:
        self.records = [r for r in self.records if getattr(r, "id", None) != record_id]


class SubmissionReviewState(ReviewState[ManpowerSubmission]):
    filters: SubmissionFilters = Field(default_factory=SubmissionFilters)


class PaymentReviewState(ReviewState[ManpowerPayment]):
    filters: PaymentFilters = Field(default_factory=PaymentFilters)

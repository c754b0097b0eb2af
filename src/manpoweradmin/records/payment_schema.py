from __future__ import annotations

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


PAYMENT_STATUSES: Tuple[str, ...] = (
    "pending",
    "processing",
    "approved",
    "completed",
    "rejected",
)

# Terminal status; the only one that allows (and forces) verification.
COMPLETED = "completed"

SERVICE_CATEGORIES: Tuple[str, ...] = (
    "recruitment",
    "visa_processing",
    "document_clearance",
    "training",
    "medical_checkup",
    "travel_arrangements",
    "deployment",
    "other_services",
)

PAYMENT_SEARCH_FIELDS: Tuple[str, ...] = (
    "user_email",
    "transaction_id",
    "payment_id",
    "payment_method",
)


class ManpowerPayment(BaseModel):
    """
    Description: One payment transaction for the manpower service.
    Layer: L1
    Input: manpowerServicePayments document (camelCase keys) + document id
    Output: Record rendered, filtered and mutated by the payments screen
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    id: str

    user_id: Optional[str] = None
    user_email: Optional[str] = None

    payment_method: Optional[str] = None
    payment_id: Optional[str] = None
    transaction_id: Optional[str] = None

    service_category: Optional[str] = None
    # Stored either as a number or as a string; see format_service.coerce_amount.
    amount: Any = None

    status: Optional[str] = None
    verified: bool = False

    submitted_at: Any = None
    transaction_date: Any = None
    additional_notes: Optional[str] = None

    @field_validator("verified", mode="before")
    @classmethod
    def _missing_verified_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def can_verify(self) -> bool:
        return self.status == COMPLETED

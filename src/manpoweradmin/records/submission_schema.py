from __future__ import annotations

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


SUBMISSION_STATUSES: Tuple[str, ...] = (
    "pending",
    "under_review",
    "approved",
    "rejected",
    "additional_info_required",
)

SERVICE_TYPES: Tuple[str, ...] = (
    "skilled_worker",
    "semi_skilled",
    "unskilled",
    "domestic_worker",
    "construction",
    "manufacturing",
    "hospitality",
    "other",
)

DESTINATION_COUNTRIES: Tuple[str, ...] = (
    "Saudi Arabia",
    "UAE",
    "Qatar",
    "Kuwait",
    "Oman",
    "Bahrain",
    "Malaysia",
    "Singapore",
    "South Korea",
    "Japan",
    "Other",
)

# Fields the free-text search looks at, in attribute names.
SUBMISSION_SEARCH_FIELDS: Tuple[str, ...] = (
    "full_name",
    "email",
    "user_email",
    "passport_number",
    "submission_id",
    "contact_number",
)


class ManpowerDocument(BaseModel):
    """
    Description: Single document attached to a manpower submission (inline base64).
    Layer: L1
    Input: `document` map of a manpowerSubmissions record
    Output: Typed attachment with payload and metadata
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    uploaded_at: Any = None
    base64_data: Optional[str] = None


class ManpowerSubmission(BaseModel):
    """
    Description: One candidate's manpower recruitment application.
    Layer: L1
    Input: manpowerSubmissions document (camelCase keys) + document id
    Output: Record rendered, filtered and mutated by the submissions screen
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

    full_name: Optional[str] = None
    passport_number: Optional[str] = None
    nationality: Optional[str] = None
    date_of_birth: Any = None

    email: Optional[str] = None
    contact_number: Optional[str] = None

    destination_country: Optional[str] = None
    service_type: Optional[str] = None

    # Intake writes values outside SUBMISSION_STATUSES (e.g. "submitted"); keep them as-is.
    status: Optional[str] = None
    verified: bool = False

    submitted_at: Any = None
    submission_id: Optional[str] = None
    additional_notes: Optional[str] = None

    document: Optional[ManpowerDocument] = None

    @field_validator("verified", mode="before")
    @classmethod
    def _missing_verified_is_false(cls, v: Any) -> Any:
        return False if v is None else v

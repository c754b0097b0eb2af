"""
Review managers: Loader + Mutator for the two admin screens
===========================================================
Each manager owns one explicit ReviewState, one NotificationService and a
per-record in-flight set. Remote writes happen first; the local list is only
patched after the store confirms, so a failed write leaves state untouched.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from manpoweradmin.config import Settings, get_settings
from manpoweradmin.core.state import PaymentReviewState, ReviewState, SubmissionReviewState, utc_now_iso
from manpoweradmin.core.store import DocumentStore, StoreError
from manpoweradmin.records.payment_schema import COMPLETED, PAYMENT_STATUSES, ManpowerPayment
from manpoweradmin.records.submission_schema import SUBMISSION_STATUSES, ManpowerSubmission
from manpoweradmin.services.analytics_service import (
    PaymentStats,
    SubmissionStats,
    compute_payment_stats,
    compute_submission_stats,
)
from manpoweradmin.services.filter_service import filter_payments, filter_submissions
from manpoweradmin.services.notification_service import NotificationService

log = logging.getLogger("review")


class MutationRejected(Exception):
    """A mutation was refused before anything was written."""


class InvalidStatusError(MutationRejected):
    pass


class VerificationNotAllowedError(MutationRejected):
    pass


class RecordBusyError(MutationRejected):
    pass


class RecordNotFoundError(MutationRejected):
    pass


class ConfirmationRequiredError(MutationRejected):
    pass


class ReviewManager:
    """
    Description: Shared loader/mutator machinery for one collection.
    Layer: L3
    Input: DocumentStore + Settings
    Output: ReviewState kept in sync with confirmed remote writes, plus banners
    """

    record_model: Type[BaseModel] = BaseModel
    label: str = "records"

    def __init__(
        self,
        store: DocumentStore,
        *,
        collection: str,
        state: ReviewState,
        settings: Optional[Settings] = None,
        notifications: Optional[NotificationService] = None,
    ) -> None:
        self.s = settings or get_settings()
        self.store = store
        self.collection = collection
        self.state = state
        self.notifications = notifications or NotificationService(success_seconds=self.s.flash_seconds)
        self._in_flight: Dict[str, str] = {}  # record id -> operation
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ load
    def load(self) -> bool:
        """
        Description: Fetch the whole collection newest-first and replace the local list.
        Layer: L3
        Input: None
        Output: True on success; on failure prior records are kept and an error banner is set.
                Documents that fail validation are skipped and listed in state.skipped_ids.
        """
        self.state.loading = True
        self.notifications.clear_error()
        try:
            raw = self.store.list_ordered(self.collection)
        except StoreError as e:
            log.error("Error loading %s from %s: %s", self.label, self.collection, e)
            self.notifications.error(f"Failed to load {self.label}: {e}")
            return False
        finally:
            self.state.loading = False

        records: List[Any] = []
        skipped: List[str] = []
        for doc in raw:
            try:
                records.append(self.record_model.model_validate(doc))
            except ValidationError as e:
                doc_id = str(doc.get("id", "?"))
                log.warning("Skipping malformed document %s/%s: %s", self.collection, doc_id, e)
                skipped.append(doc_id)

        self.state.records = records
        self.state.skipped_ids = skipped
        self.state.loaded_at_utc = utc_now_iso()
        log.info("Loaded %d %s from %s (%d skipped)", len(records), self.label, self.collection, len(skipped))
        return True

    # ------------------------------------------------------------- in-flight
    def is_busy(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._in_flight

    def in_flight(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._in_flight)

    @contextmanager
    def _claim(self, record_id: str, operation: str) -> Iterator[None]:
        with self._lock:
            pending = self._in_flight.get(record_id)
            if pending is not None:
                raise RecordBusyError(f"Another update ({pending}) is still in progress for {record_id}")
            self._in_flight[record_id] = operation
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.pop(record_id, None)

    def _require(self, record_id: str) -> Any:
        record = self.state.find(record_id)
        if record is None:
            raise RecordNotFoundError(f"Record {record_id} is not loaded")
        return record

    def _patch(self, record_id: str, fields: Dict[str, Any]) -> None:
        current = self.state.find(record_id)
        if current is not None:
            self.state.replace(current.model_copy(update=fields))

    def _mutate(self, record_id: str, operation: str, failure_prefix: str, action: Callable[[], str]) -> bool:
        """Run one mutation under the record's in-flight claim and translate the outcome into banners."""
        self.notifications.clear_error()
        try:
            with self._claim(record_id, operation):
                message = action()
        except MutationRejected as e:
            log.warning("%s rejected for %s/%s: %s", operation, self.collection, record_id, e)
            self.notifications.error(f"{failure_prefix}{e}")
            return False
        except StoreError as e:
            log.error("%s failed for %s/%s: %s", operation, self.collection, record_id, e)
            self.notifications.error(f"{failure_prefix}{e}")
            return False

        log.info("%s ok for %s/%s", operation, self.collection, record_id)
        self.notifications.success(message)
        return True

    def _check_status(self, new_status: str, allowed: Tuple[str, ...]) -> None:
        if new_status not in allowed:
            raise InvalidStatusError(f"'{new_status}' is not one of {', '.join(allowed)}")


class SubmissionReviewManager(ReviewManager):
    """
    Description: Loader + mutators for manpower submissions.
    Layer: L3
    Input: DocumentStore (manpowerSubmissions)
    Output: status updates, verification toggles, confirmed deletes
    """

    record_model = ManpowerSubmission
    label = "manpower submissions"
    state: SubmissionReviewState

    def __init__(self, store: DocumentStore, *, settings: Optional[Settings] = None, **kwargs: Any) -> None:
        s = settings or get_settings()
        super().__init__(
            store,
            collection=s.submissions_collection,
            state=SubmissionReviewState(),
            settings=s,
            **kwargs,
        )

    def view(self) -> List[ManpowerSubmission]:
        f = self.state.filters
        return filter_submissions(
            self.state.records,
            search_term=f.search_term,
            status=f.status,
            destination_country=f.destination_country,
            service_type=f.service_type,
        )

    def stats(self) -> SubmissionStats:
        return compute_submission_stats(self.state.records)

    def update_status(self, submission_id: str, new_status: str) -> bool:
        def action() -> str:
            self._require(submission_id)
            self._check_status(new_status, SUBMISSION_STATUSES)
            self.store.update(self.collection, submission_id, {"status": new_status})
            self._patch(submission_id, {"status": new_status})
            return f"Status updated to {new_status} successfully"

        return self._mutate(submission_id, "update_status", "Failed to update status: ", action)

    def toggle_verified(self, submission_id: str, current_verified: bool) -> bool:
        target = not current_verified

        def action() -> str:
            self._require(submission_id)
            self.store.update(self.collection, submission_id, {"verified": target})
            self._patch(submission_id, {"verified": target})
            return f"Submission {'verified' if target else 'unverified'} successfully"

        return self._mutate(submission_id, "toggle_verified", "Failed to update verification: ", action)

    def delete(self, submission_id: str, *, confirmed: bool = False) -> bool:
        """Irreversible; the caller must pass confirmed=True after asking the reviewer."""

        def action() -> str:
            self._require(submission_id)
            if not confirmed:
                raise ConfirmationRequiredError("deletion must be confirmed")
            self.store.delete(self.collection, submission_id)
            self.state.remove(submission_id)
            return "Manpower submission deleted successfully"

        return self._mutate(submission_id, "delete", "Failed to delete submission: ", action)


class PaymentReviewManager(ReviewManager):
    """
    Description: Loader + mutators for manpower service payments.
    Layer: L3
    Input: DocumentStore (manpowerServicePayments)
    Output: status updates (completed forces verified) and guarded verification toggles
    """

    record_model = ManpowerPayment
    label = "manpower payments"
    state: PaymentReviewState

    def __init__(self, store: DocumentStore, *, settings: Optional[Settings] = None, **kwargs: Any) -> None:
        s = settings or get_settings()
        super().__init__(
            store,
            collection=s.payments_collection,
            state=PaymentReviewState(),
            settings=s,
            **kwargs,
        )

    def view(self) -> List[ManpowerPayment]:
        f = self.state.filters
        return filter_payments(
            self.state.records,
            search_term=f.search_term,
            status=f.status,
            service_category=f.service_category,
        )

    def stats(self) -> PaymentStats:
        return compute_payment_stats(self.state.records)

    def update_status(self, payment_id: str, new_status: str) -> bool:
        def action() -> str:
            self._require(payment_id)
            self._check_status(new_status, PAYMENT_STATUSES)
            fields: Dict[str, Any] = {"status": new_status}
            # Leaving "completed" keeps verified as-is (sticky verification).
            if new_status == COMPLETED:
                fields["verified"] = True
            self.store.update(self.collection, payment_id, fields)
            self._patch(payment_id, fields)
            return f"Payment status updated to {new_status} successfully"

        return self._mutate(payment_id, "update_status", "Failed to update payment status: ", action)

    def toggle_verified(self, payment_id: str, current_verified: bool) -> bool:
        target = not current_verified

        def action() -> str:
            payment: ManpowerPayment = self._require(payment_id)
            if not payment.can_verify:
                raise VerificationNotAllowedError("Complete payment first")
            self.store.update(self.collection, payment_id, {"verified": target})
            self._patch(payment_id, {"verified": target})
            return f"Payment {'verified' if target else 'unverified'} successfully"

        return self._mutate(payment_id, "toggle_verified", "Failed to update verification: ", action)

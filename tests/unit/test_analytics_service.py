from manpoweradmin.records.payment_schema import ManpowerPayment
from manpoweradmin.records.submission_schema import ManpowerSubmission
from manpoweradmin.services.analytics_service import compute_payment_stats, compute_submission_stats, sum_amounts


def test_submission_counts_ignore_filters_and_count_everything() -> None:
    statuses = ["pending", "pending", "approved", "rejected", "approved"]
    countries = ["UAE", "Qatar", "UAE", None, "Japan"]
    subs = [
        ManpowerSubmission(id=str(i), status=st, destination_country=c, verified=(i % 2 == 0))
        for i, (st, c) in enumerate(zip(statuses, countries))
    ]
    stats = compute_submission_stats(subs)
    assert stats.total == 5
    assert stats.pending == 2
    assert stats.approved == 2
    assert stats.rejected == 1
    assert stats.verified == 3
    assert stats.countries == 3
    assert stats.by_status["under_review"] == 0


def test_unknown_submission_status_only_counts_toward_total() -> None:
    stats = compute_submission_stats([ManpowerSubmission(id="x", status="submitted")])
    assert stats.total == 1
    assert stats.pending == 0
    assert sum(stats.by_status.values()) == 0


def test_amount_sum_treats_missing_and_garbage_as_zero() -> None:
    assert sum_amounts(["100", 50, None, "abc"]) == 150
    assert sum_amounts(["nan", "inf", True]) == 0


def test_payment_stats() -> None:
    payments = [
        ManpowerPayment(id="1", status="pending", amount="100"),
        ManpowerPayment(id="2", status="completed", amount=50, verified=True),
        ManpowerPayment(id="3", status="processing", amount=None),
        ManpowerPayment(id="4", status="rejected", amount="abc"),
        ManpowerPayment(id="5", status="approved", amount="12.5"),
    ]
    stats = compute_payment_stats(payments)
    assert stats.total == 5
    assert (stats.pending, stats.processing, stats.approved, stats.completed, stats.rejected) == (1, 1, 1, 1, 1)
    assert stats.verified == 1
    assert stats.total_amount == 162.5


def test_empty_lists() -> None:
    assert compute_submission_stats([]).total == 0
    assert compute_payment_stats([]).total_amount == 0.0

"""Tests for ETA and elapsed display derivation."""

from apply_progress.core.eta import elapsed_display, estimate_remaining


def test_server_formatted_estimate_wins(make_snapshot):
    snapshot = make_snapshot(
        "applying",
        time={"estimated_remaining_seconds": 90, "estimated_remaining_formatted": "about 2 mins"},
    )
    assert estimate_remaining(snapshot) == "about 2 mins"


def test_raw_seconds_formatted_locally(make_snapshot):
    snapshot = make_snapshot("applying", time={"estimated_remaining_seconds": 65})
    assert estimate_remaining(snapshot) == "1 min 5 secs"


def test_no_estimate_without_positive_seconds(make_snapshot):
    assert estimate_remaining(make_snapshot("applying", time={"estimated_remaining_seconds": 0})) is None
    assert estimate_remaining(make_snapshot("applying", time={})) is None
    assert estimate_remaining(make_snapshot("applying")) is None


def test_no_estimate_for_finished_runs(make_snapshot):
    timing = {"estimated_remaining_seconds": 30, "estimated_remaining_formatted": "30 secs"}
    assert estimate_remaining(make_snapshot("completed", time=timing)) is None
    assert estimate_remaining(make_snapshot("failed", time=timing)) is None


def test_elapsed_prefers_server_text(make_snapshot):
    snapshot = make_snapshot("fetching", time={"elapsed_formatted": "2 mins 3 secs"})
    assert elapsed_display(snapshot, 5) == "2 mins 3 secs"


def test_elapsed_falls_back_to_local_clock(make_snapshot):
    assert elapsed_display(make_snapshot("fetching"), 65) == "1 min 5 secs"
    assert elapsed_display(None, 1) == "1 sec"


def test_non_finite_seconds_show_no_estimate(make_snapshot):
    from apply_progress.models.progress import RunTiming

    timing = RunTiming.model_construct(estimated_remaining_seconds=float("inf"))
    snapshot = make_snapshot("applying").model_copy(update={"time": timing})
    assert estimate_remaining(snapshot) is None

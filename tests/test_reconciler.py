"""Tests for reconciliation of omitted identifiers."""

from vtsync.core.schemas import VideoStatus, VideoUpdate
from vtsync.sync.reconciler import reconcile


def _record(video_id: str, status: VideoStatus = VideoStatus.LIVE) -> VideoUpdate:
    return VideoUpdate(video_id=video_id, status=status)


def test_missing_id_is_synthesized():
    """Requested [A, B, C], fetched [A, C] -> B is missing."""
    results = reconcile(["A", "B", "C"], [_record("A"), _record("C", VideoStatus.ENDED)])

    by_id = {r.video_id: r for r in results}
    assert set(by_id) == {"A", "B", "C"}
    assert by_id["A"].status == VideoStatus.LIVE
    assert by_id["C"].status == VideoStatus.ENDED
    assert by_id["B"].status == VideoStatus.MISSING


def test_existing_results_come_first():
    results = reconcile(["A", "B", "C"], [_record("C")])
    assert [r.video_id for r in results] == ["C", "A", "B"]


def test_empty_response_marks_everything_missing():
    results = reconcile(["A", "B"], [])
    assert [(r.video_id, r.status) for r in results] == [
        ("A", VideoStatus.MISSING),
        ("B", VideoStatus.MISSING),
    ]


def test_exactly_one_record_per_requested_id():
    requested = ["A", "B", "C", "D"]
    partial = [_record("B"), _record("B", VideoStatus.ENDED), _record("Z"), _record("D")]

    results = reconcile(requested, partial)

    ids = [r.video_id for r in results]
    assert sorted(ids) == sorted(requested)
    assert len(ids) == len(set(ids))
    assert next(r for r in results if r.video_id == "B").status == VideoStatus.LIVE


def test_duplicate_requested_ids_yield_one_record():
    results = reconcile(["A", "A", "B"], [])
    assert [r.video_id for r in results] == ["A", "B"]


def test_missing_record_only_changes_status():
    (record,) = reconcile(["A"], [], platform_id="yt")
    assert record.platform_id == "yt"
    assert record.changes() == {"status": "missing"}


def test_full_coverage_over_many_subsets():
    requested = [f"v{i}" for i in range(10)]
    for step in range(1, 5):
        partial = [_record(video_id) for video_id in requested[::step]]
        results = reconcile(requested, partial)
        assert {r.video_id for r in results} == set(requested)
        assert len(results) == len(requested)

"""Gap-filling for identifiers the external source silently omitted."""

from collections.abc import Iterable, Sequence

from vtsync.core.schemas import Platform, VideoUpdate


def reconcile(
    requested_ids: Sequence[str],
    partial_results: Iterable[VideoUpdate],
    platform_id: str = Platform.YOUTUBE.value,
) -> list[VideoUpdate]:
    """
    Complete a partial fetch result so it covers every requested id.

    Existing results come first, in response order, followed by a
    ``missing`` record for each requested id absent from the response.
    Duplicate and unrequested results are dropped, so the output holds
    exactly one record per requested id.

    Args:
        requested_ids: Ids sent to the external source
        partial_results: Parsed records returned by it
        platform_id: Platform of the synthesized records

    Returns:
        One record per distinct requested id
    """
    wanted = set(requested_ids)
    results: list[VideoUpdate] = []
    seen: set[str] = set()

    for record in partial_results:
        if record.video_id in wanted and record.video_id not in seen:
            seen.add(record.video_id)
            results.append(record)

    for video_id in requested_ids:
        if video_id not in seen:
            seen.add(video_id)
            results.append(VideoUpdate.missing(video_id, platform_id))

    return results

"""Partition entities into per-platform buckets."""

from collections.abc import Iterable
from typing import Protocol, TypeVar

from vtsync.core.exceptions import UnknownPlatformError
from vtsync.core.schemas import Platform


class PlatformEntity(Protocol):
    platform_id: str


T = TypeVar("T", bound=PlatformEntity)


def _entity_id(entity: object) -> str | None:
    for attr in ("video_id", "channel_id"):
        value = getattr(entity, attr, None)
        if value is not None:
            return str(value)
    return None


def partition(entities: Iterable[T]) -> dict[Platform, list[T]]:
    """
    Group entities by platform, preserving relative order within a bucket.

    Every platform has a bucket, possibly empty.

    Raises:
        UnknownPlatformError: An entity's platform id is not a known Platform
    """
    buckets: dict[Platform, list[T]] = {platform: [] for platform in Platform}
    for entity in entities:
        try:
            platform = Platform(entity.platform_id)
        except ValueError:
            raise UnknownPlatformError(entity.platform_id, _entity_id(entity)) from None
        buckets[platform].append(entity)
    return buckets

"""vtsync - keep tracked livestreams and videos in sync across platforms."""

from vtsync.core.constants import APP_VERSION
from vtsync.sync import FetchScheduler, Orchestrator, derive_status, partition, reconcile

__version__ = APP_VERSION
__all__ = ["FetchScheduler", "Orchestrator", "derive_status", "partition", "reconcile"]

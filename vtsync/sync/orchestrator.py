"""Orchestration of the validation, persist, update and scrape stages."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel

from vtsync.channels import ChannelFile, load_channel_files, to_channel, validate_channel
from vtsync.core.config import Settings, get_settings
from vtsync.core.exceptions import ChannelDefinitionError
from vtsync.core.logging_config import get_logger, log_scrape_event
from vtsync.core.schemas import (
    Channel,
    ChannelValidationFailure,
    InitReport,
    Platform,
    PersistReport,
    ScrapeResult,
    ScrapeSummary,
    UpdateResult,
    UpdateSummary,
    ValidationReport,
    utcnow,
)
from vtsync.sync.ports import ChannelScraper, SyncStore
from vtsync.sync.registry import PlatformRegistry
from vtsync.sync.router import partition

logger = get_logger("sync.orchestrator")


class Stage(str, Enum):
    """A single step of a sync run."""

    VALIDATE = "validate"
    PERSIST = "persist"
    UPDATE = "update"
    SCRAPE = "scrape"
    DROP_COLLECTIONS = "drop-collections"
    DROP_DATABASE = "drop-database"


class Action(str, Enum):
    """User-requested operations."""

    INIT = "init"
    VALIDATE = "validate"
    SAVE_UPDATE = "save-update"
    SAVE = "save"
    UPDATE = "update"
    SCRAPE = "scrape"
    DROP_COLLECTIONS = "drop-collections"
    DROP_DATABASE = "drop-database"


ACTION_STAGES: dict[Action, tuple[Stage, ...]] = {
    Action.INIT: (Stage.VALIDATE, Stage.PERSIST, Stage.UPDATE, Stage.SCRAPE),
    Action.VALIDATE: (Stage.VALIDATE,),
    Action.SAVE_UPDATE: (Stage.PERSIST, Stage.UPDATE),
    Action.SAVE: (Stage.PERSIST,),
    Action.UPDATE: (Stage.UPDATE,),
    Action.SCRAPE: (Stage.SCRAPE,),
    Action.DROP_COLLECTIONS: (Stage.DROP_COLLECTIONS,),
    Action.DROP_DATABASE: (Stage.DROP_DATABASE,),
}


class Orchestrator:
    """Sequence sync stages and fan out per-platform work.

    Each platform task returns its own result; results are merged only after
    all tasks have joined.

    Usage:
        async with MongoDBManager() as db:
            orchestrator = Orchestrator(db, build_registry(db))
            report = await orchestrator.initialize()
    """

    def __init__(
        self,
        store: SyncStore,
        registry: PlatformRegistry,
        loader: Callable[[], list[ChannelFile]] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.registry = registry
        self.settings = settings or get_settings()
        self.loader = loader or (lambda: load_channel_files(self.settings.channels_path))

    # Validation and persistence

    def validate(self) -> ValidationReport:
        """
        Validate every channel definition, continuing past failures.

        Returns:
            ValidationReport; ``ok`` only when all entries passed
        """
        try:
            files = self.loader()
        except ChannelDefinitionError as e:
            logger.error(str(e))
            return ValidationReport(error=str(e))

        report = ValidationReport()
        for channel_file in files:
            for entry in channel_file.entries:
                report.total += 1
                errors = validate_channel(entry)
                if not errors:
                    continue
                report.failures.append(
                    ChannelValidationFailure(
                        filename=channel_file.filename, entry=entry, errors=errors
                    )
                )
                details = "; ".join(f"{err.field}: {err.message}" for err in errors)
                logger.error(f"{channel_file.filename}: invalid channel {entry!r} ({details})")

        logger.info(f"Found {report.total} channels.")
        if report.failures:
            logger.info(f"Failed to validate {len(report.failures)} channels.")
        else:
            logger.info("All channels validated successfully.")
        return report

    async def persist(self) -> PersistReport:
        """
        Save channel definitions file by file.

        A failing file is logged and skipped; sibling files are still saved.
        """
        report = PersistReport()
        for channel_file in self.loader():
            try:
                channels = [to_channel(entry) for entry in channel_file.entries]
                saved = await self.store.insert_channels(channels)
            except Exception as e:
                report.failed_files.append(channel_file.filename)
                logger.error(f"{channel_file.filename} FAILED: {e}")
                continue
            report.saved_files.append(channel_file.filename)
            report.channels_saved += saved
            logger.info(f"{channel_file.filename} OK")
        return report

    # Cycles

    async def _gather(
        self, jobs: dict[Platform, Awaitable[Any]]
    ) -> tuple[list[Any], list[str]]:
        """Run platform tasks concurrently; split results from failed platforms."""
        outcomes = await asyncio.gather(*jobs.values(), return_exceptions=True)
        results: list[Any] = []
        failed: list[str] = []
        for platform, outcome in zip(jobs, outcomes):
            if isinstance(outcome, Exception):
                failed.append(platform.value)
                logger.error(f"Platform task failed [{platform.value}]: {outcome!r}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)
        return results, failed

    async def update_cycle(self) -> UpdateSummary:
        """Refresh stale videos on every platform with a registered updater."""
        buckets = partition(await self.store.list_videos())

        jobs: dict[Platform, Awaitable[UpdateResult]] = {}
        for platform, videos in buckets.items():
            updater = self.registry.updater(platform)
            if updater is None or not videos:
                continue
            jobs[platform] = updater(videos)

        results, failed = await self._gather(jobs)
        for result in results:
            result.tracked = len(buckets[Platform(result.platform_id)])

        summary = UpdateSummary(results=results, failed_platforms=failed)
        logger.info(
            f"Update complete: {summary.updated} videos updated, "
            f"{summary.missing} missing, {len(failed)} platforms failed"
        )
        return summary

    async def _scrape_platform(
        self, platform: Platform, scraper: ChannelScraper, channels: Sequence[Channel]
    ) -> ScrapeResult:
        """Scrape one platform's channels one at a time."""
        result = ScrapeResult(platform_id=platform.value)
        for channel in channels:
            log_scrape_event(logger, platform.value, channel.channel_id, "started")
            try:
                outcome = await scraper(channel)
                result.video_count += outcome.video_count
                if outcome.status != "OK":
                    result.fail.append(channel.channel_id)
                    log_scrape_event(
                        logger, platform.value, channel.channel_id, "failed", error="scraper reported FAIL"
                    )
                    continue
            except Exception as e:
                result.fail.append(channel.channel_id)
                log_scrape_event(logger, platform.value, channel.channel_id, "failed", error=str(e))
                continue

            try:
                await self.store.mark_crawled(channel, utcnow())
            except Exception as e:
                result.fail.append(channel.channel_id)
                logger.error(
                    f"Scraped {channel.channel_id} [{platform.value}] "
                    f"({outcome.video_count} new videos) but crawl marker not set: {e}",
                    extra={"platform_id": platform.value, "channel_id": channel.channel_id},
                )
                continue
            result.ok.append(channel.channel_id)
            log_scrape_event(
                logger, platform.value, channel.channel_id, "completed", video_count=outcome.video_count
            )
        return result

    async def scrape_cycle(self) -> ScrapeSummary:
        """Discover historical videos for channels never crawled."""
        channels = await self.store.list_channels(uncrawled_only=True)
        if not channels:
            logger.warning("No uncrawled channels found.")
            return ScrapeSummary()

        jobs: dict[Platform, Awaitable[ScrapeResult]] = {}
        for platform, bucket in partition(channels).items():
            scraper = self.registry.scraper(platform)
            if scraper is None or not bucket:
                continue
            jobs[platform] = self._scrape_platform(platform, scraper, bucket)

        results, failed = await self._gather(jobs)
        summary = ScrapeSummary.merge(results, failed)
        logger.info(
            f"Scrape complete: OK={len(summary.ok)} FAIL={len(summary.fail)} "
            f"videoCount={summary.video_count}"
        )
        if summary.fail:
            logger.info(f"Failed channels: {', '.join(summary.fail)}")
        return summary

    # Sequences

    async def run(self, action: Action) -> dict[Stage, BaseModel | None]:
        """
        Execute the stages of ``action`` in order.

        A failed validation stops the remaining stages.

        Returns:
            Result of each stage that ran, keyed by stage
        """
        results: dict[Stage, BaseModel | None] = {}
        for stage in ACTION_STAGES[action]:
            if stage == Stage.VALIDATE:
                report = self.validate()
                results[stage] = report
                if not report.ok:
                    logger.error("Validation failed, aborting.")
                    break
            elif stage == Stage.PERSIST:
                results[stage] = await self.persist()
            elif stage == Stage.UPDATE:
                results[stage] = await self.update_cycle()
            elif stage == Stage.SCRAPE:
                results[stage] = await self.scrape_cycle()
            elif stage == Stage.DROP_COLLECTIONS:
                logger.info("Dropping channel related collections...")
                await self.store.drop_collections()
                results[stage] = None
            elif stage == Stage.DROP_DATABASE:
                logger.info("Dropping database...")
                await self.store.drop_database()
                results[stage] = None
        return results

    async def initialize(self) -> InitReport:
        """Validate, save channels, update videos, then scrape new channels."""
        results = await self.run(Action.INIT)
        return InitReport(
            validation=results[Stage.VALIDATE],
            persist=results.get(Stage.PERSIST),
            update=results.get(Stage.UPDATE),
            scrape=results.get(Stage.SCRAPE),
        )

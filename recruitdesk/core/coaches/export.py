"""
Coach list export for the outside sending tool.

An export is a short sequence of steps:
1. Look up the team member who is exporting
2. Fetch every matching coach (one large page)
3. Render the CSV
4. Upload it to object storage under {campaign_id}/{file_name}
5. Sign a download URL
6. Record a sending-tool lead list on the campaign

Steps 4-6 span two systems with no shared transaction. A failure in 4 or 5
aborts before anything is recorded. A failure in 6 runs the compensating
step (delete the uploaded file) and fails the export, unless rollback is
switched off, in which case the file is kept and the export succeeds with a
warning.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Sequence

from ..campaigns.models import LeadList
from ..campaigns.stores import LeadListStore, TeamDirectory
from .composer import CoachQueryComposer
from .csv_export import generate_csv
from .directory import CoachDirectory, QueryError
from .filters import CoachFilters

logger = logging.getLogger(__name__)

SEVEN_DAYS_SECONDS = 60 * 60 * 24 * 7


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class ExportError(Exception):
    """Raised when an export cannot be completed."""
    pass


class ExportStorage(Protocol):
    """The object storage operations an export needs."""

    async def upload_export(self, data: bytes, campaign_id: str, file_name: str) -> str:
        """Upload without overwriting and return the storage path."""
        ...

    async def get_presigned_url(self, storage_path: str, expiry_seconds: int = 3600) -> str:
        ...

    async def delete_object(self, storage_path: str) -> None:
        ...


@dataclass
class ExportResult:
    file_name: str
    csv_content: str
    row_count: int
    file_url: str
    storage_path: str


def export_file_name(now: datetime) -> str:
    """coach-export-2026-10-18T14-03-22-123Z.csv"""
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    millis = now.microsecond // 1000
    return f"coach-export-{stamp}-{millis:03d}Z.csv"


class CoachListExporter:

    def __init__(
        self,
        directory: CoachDirectory,
        storage: ExportStorage,
        lead_lists: LeadListStore,
        team: TeamDirectory,
        page_size: int = 10000,
        url_ttl_seconds: int = SEVEN_DAYS_SECONDS,
        rollback_on_record_failure: bool = True,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._composer = CoachQueryComposer(directory)
        self._storage = storage
        self._lead_lists = lead_lists
        self._team = team
        self._page_size = page_size
        self._url_ttl_seconds = url_ttl_seconds
        self._rollback_on_record_failure = rollback_on_record_failure
        self._clock = clock

    async def export(
        self,
        user_id: str,
        campaign_id: str,
        coach_ids: Optional[Sequence[str]] = None,
        filters: Optional[CoachFilters] = None,
    ) -> ExportResult:
        try:
            team_member_id = self._team.find_team_member_id(user_id)
        except QueryError as e:
            raise ExportError(f"Failed to look up team member: {e}") from e
        if not team_member_id:
            raise ExportError("Team member not found")

        try:
            page = self._composer.get_page(
                page=1,
                page_size=self._page_size,
                filters=filters,
                coach_ids=coach_ids,
            )
        except QueryError as e:
            raise ExportError(f"Failed to fetch coaches: {e}") from e

        coaches = page.records
        if page.pagination.total_count > self._page_size:
            logger.warning(
                "Export truncated to one page",
                extra={
                    "campaign_id": campaign_id,
                    "total_count": page.pagination.total_count,
                    "page_size": self._page_size,
                }
            )

        csv_content = generate_csv(coaches)
        file_name = export_file_name(self._clock())

        try:
            storage_path = await self._storage.upload_export(
                csv_content.encode("utf-8"), campaign_id, file_name
            )
        except StorageError as e:
            raise ExportError(f"Failed to upload file: {e}") from e

        try:
            file_url = await self._storage.get_presigned_url(
                storage_path, expiry_seconds=self._url_ttl_seconds
            )
        except StorageError as e:
            logger.error(
                "URL generation failed",
                extra={"storage_path": storage_path, "error": str(e)}
            )
            raise ExportError("Failed to generate file URL") from e

        await self._record_lead_list(
            LeadList(
                campaign_id=campaign_id,
                file_url=file_url,
                row_count=len(coaches),
                generated_by=team_member_id,
                internal_notes=f"Exported {len(coaches)} coaches",
            ),
            storage_path,
        )

        logger.info(
            "Coach list exported",
            extra={
                "campaign_id": campaign_id,
                "row_count": len(coaches),
                "storage_path": storage_path,
            }
        )

        return ExportResult(
            file_name=file_name,
            csv_content=csv_content,
            row_count=len(coaches),
            file_url=file_url,
            storage_path=storage_path,
        )

    async def _record_lead_list(self, lead_list: LeadList, storage_path: str) -> None:
        try:
            self._lead_lists.create(lead_list)
            return
        except QueryError as e:
            error = e

        if not self._rollback_on_record_failure:
            logger.warning(
                "Lead list record failed, keeping uploaded file",
                extra={"storage_path": storage_path, "error": str(error)}
            )
            return

        try:
            await self._storage.delete_object(storage_path)
        except StorageError as e:
            logger.error(
                "Rollback failed, uploaded file is orphaned",
                extra={"storage_path": storage_path, "error": str(e)}
            )
        else:
            logger.info("Rolled back uploaded export", extra={"storage_path": storage_path})

        raise ExportError(f"Failed to record export: {error}") from error

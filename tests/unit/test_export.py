"""
Unit tests for the coach list export and its compensating rollback.

Async steps are driven with asyncio.run; storage is the in-memory mock
client with failures injected by operation name.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from recruitdesk.core.coaches.actions import export_coach_list_action
from recruitdesk.core.coaches.csv_export import CSV_HEADERS
from recruitdesk.core.coaches.export import (
    SEVEN_DAYS_SECONDS,
    CoachListExporter,
    ExportError,
    export_file_name,
)
from recruitdesk.core.coaches.filters import CoachFilters
from recruitdesk.infrastructure.memory import InMemoryLeadListStore, InMemoryTeamDirectory

FIXED_NOW = datetime(2026, 10, 18, 14, 3, 22, 123456, tzinfo=timezone.utc)
FILE_NAME = "coach-export-2026-10-18T14-03-22-123Z.csv"


def make_exporter(directory, storage, lead_lists, team, **kwargs):
    return CoachListExporter(
        directory=directory,
        storage=storage,
        lead_lists=lead_lists,
        team=team,
        clock=lambda: FIXED_NOW,
        **kwargs,
    )


class TestExportFileName:

    def test_timestamp_format(self):
        assert export_file_name(FIXED_NOW) == FILE_NAME


class TestSuccessfulExport:

    def test_uploads_signs_and_records(self, directory, storage, lead_lists, team):
        exporter = make_exporter(directory, storage, lead_lists, team)

        result = asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert result.file_name == FILE_NAME
        assert result.row_count == 6
        assert result.storage_path == f"camp-1/{FILE_NAME}"
        assert result.file_url == f"mock://storage/camp-1/{FILE_NAME}?expires={SEVEN_DAYS_SECONDS}"
        assert storage.get_object(result.storage_path) == result.csv_content.encode("utf-8")

        [recorded] = lead_lists.list_for_campaign("camp-1")
        assert recorded.file_url == result.file_url
        assert recorded.row_count == 6
        assert recorded.generated_by == "member-1"
        assert recorded.format == "csv"
        assert recorded.internal_notes == "Exported 6 coaches"

    def test_csv_matches_filters(self, directory, storage, lead_lists, team):
        exporter = make_exporter(directory, storage, lead_lists, team)
        filters = CoachFilters.from_simple(divisions=["NCAA Division I"])

        result = asyncio.run(
            exporter.export(user_id="user-1", campaign_id="camp-1", filters=filters)
        )

        lines = result.csv_content.split("\n")
        assert lines[0] == ",".join(CSV_HEADERS)
        assert len(lines) == 3
        assert result.row_count == 2

    def test_export_is_limited_to_one_page(self, directory, storage, lead_lists, team):
        exporter = make_exporter(directory, storage, lead_lists, team, page_size=2)

        result = asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert result.row_count == 2

    def test_empty_result_still_exports_header(self, directory, storage, lead_lists, team):
        exporter = make_exporter(directory, storage, lead_lists, team)
        filters = CoachFilters.from_simple(divisions=["Club"])

        result = asyncio.run(
            exporter.export(user_id="user-1", campaign_id="camp-1", filters=filters)
        )

        assert result.row_count == 0
        assert result.csv_content == ",".join(CSV_HEADERS)
        assert lead_lists.list_for_campaign("camp-1")[0].internal_notes == "Exported 0 coaches"


class TestFailedExport:

    def test_unknown_team_member(self, directory, storage, lead_lists):
        exporter = make_exporter(directory, storage, lead_lists, InMemoryTeamDirectory())

        with pytest.raises(ExportError, match="Team member not found"):
            asyncio.run(exporter.export(user_id="stranger", campaign_id="camp-1"))

        assert storage.list_paths() == []

    def test_directory_failure(self, make_directory, storage, lead_lists, team):
        directory = make_directory(fail_on={"count_jobs"})
        exporter = make_exporter(directory, storage, lead_lists, team)

        with pytest.raises(ExportError, match="Failed to fetch coaches"):
            asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

    def test_upload_failure_records_nothing(self, directory, storage, lead_lists, team):
        storage.fail_on.add("upload")
        exporter = make_exporter(directory, storage, lead_lists, team)

        with pytest.raises(ExportError, match="Failed to upload file"):
            asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert lead_lists.list_for_campaign("camp-1") == []

    def test_existing_file_is_not_overwritten(self, directory, storage, lead_lists, team):
        exporter = make_exporter(directory, storage, lead_lists, team)
        asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        with pytest.raises(ExportError, match="Failed to upload file"):
            asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert len(lead_lists.list_for_campaign("camp-1")) == 1

    def test_signing_failure_records_nothing(self, directory, storage, lead_lists, team):
        storage.fail_on.add("sign")
        exporter = make_exporter(directory, storage, lead_lists, team)

        with pytest.raises(ExportError, match="Failed to generate file URL"):
            asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert lead_lists.list_for_campaign("camp-1") == []


class TestRecordFailure:

    def test_rollback_deletes_uploaded_file(self, directory, storage, team):
        lead_lists = InMemoryLeadListStore(fail_on={"create"})
        exporter = make_exporter(directory, storage, lead_lists, team)

        with pytest.raises(ExportError, match="Failed to record export"):
            asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert storage.list_paths() == []

    def test_failed_rollback_still_fails_export(self, directory, storage, team):
        lead_lists = InMemoryLeadListStore(fail_on={"create"})
        storage.fail_on.add("delete")
        exporter = make_exporter(directory, storage, lead_lists, team)

        with pytest.raises(ExportError, match="Failed to record export"):
            asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert storage.list_paths() == [f"camp-1/{FILE_NAME}"]

    def test_without_rollback_export_succeeds(self, directory, storage, team):
        lead_lists = InMemoryLeadListStore(fail_on={"create"})
        exporter = make_exporter(
            directory, storage, lead_lists, team, rollback_on_record_failure=False
        )

        result = asyncio.run(exporter.export(user_id="user-1", campaign_id="camp-1"))

        assert result.row_count == 6
        assert storage.list_paths() == [result.storage_path]


class TestExportAction:

    def test_requires_login(self, directory, storage, lead_lists, team):
        exporter = make_exporter(directory, storage, lead_lists, team)

        result = asyncio.run(export_coach_list_action(exporter, user_id=None, campaign_id="camp-1"))

        assert not result.success
        assert result.error == "You must be logged in"
        assert storage.list_paths() == []

    def test_export_error_becomes_server_error(self, directory, storage, lead_lists):
        exporter = make_exporter(directory, storage, lead_lists, InMemoryTeamDirectory())

        result = asyncio.run(
            export_coach_list_action(exporter, user_id="user-1", campaign_id="camp-1")
        )

        assert not result.success
        assert result.server_error == "Team member not found"

    def test_success_wraps_result(self, directory, storage, lead_lists, team):
        exporter = make_exporter(directory, storage, lead_lists, team)

        result = asyncio.run(
            export_coach_list_action(
                exporter, user_id="user-1", campaign_id="camp-1", coach_ids=["c-1"]
            )
        )

        assert result.success
        assert result.data.row_count == 2

"""
Snowflake repositories for campaigns, campaign leads, sending-tool lead lists
and team members.

Campaigns and campaign leads are soft-deleted (`is_deleted`, `deleted_at`);
lead lists are removed outright.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from ....core.campaigns.models import (
    Campaign,
    CampaignLeadNotFoundError,
    CampaignNotFoundError,
    CampaignStatus,
    CampaignType,
    LeadList,
    NewCampaign,
    validate_campaign_changes,
)
from ....core.coaches.directory import QueryError
from ..client import SnowflakeConnection

logger = logging.getLogger(__name__)


_CAMPAIGN_COLUMNS = (
    "id, athlete_id, name, type, status, primary_lead_list_id, "
    "seed_campaign_id, daily_send_cap, start_date, end_date, internal_notes, "
    "is_deleted, deleted_at, created_at"
)


class SnowflakeCampaignStore:
    """Repository for campaign persistence."""

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def create(self, new: NewCampaign) -> Campaign:
        campaign = Campaign.from_new(new)
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO campaigns (
                    id, athlete_id, name, type, status, primary_lead_list_id,
                    daily_send_cap, start_date, end_date, internal_notes,
                    is_deleted, created_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, FALSE, %s)
            """, (
                campaign.id, campaign.athlete_id, campaign.name,
                campaign.type.value, campaign.status.value,
                campaign.primary_lead_list_id, campaign.daily_send_cap,
                campaign.start_date, campaign.end_date, campaign.internal_notes,
                campaign.created_at,
            ))
            self._conn.commit()

        except Exception as e:
            logger.error(
                "Failed to create campaign",
                extra={"athlete_id": new.athlete_id, "error": str(e)}
            )
            raise
        finally:
            cursor.close()

        logger.info("Created campaign", extra={"campaign_id": campaign.id})
        return campaign

    def get(self, campaign_id: str) -> Campaign:
        cursor = self._conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {_CAMPAIGN_COLUMNS}
                FROM campaigns
                WHERE id = %s AND is_deleted = FALSE
            """, (campaign_id,))

            row = cursor.fetchone()
            if not row:
                raise CampaignNotFoundError(f"Campaign {campaign_id} not found")

            return self._build_campaign(row)

        finally:
            cursor.close()

    def search(
        self,
        search_term: str = "",
        page: int = 0,
        page_size: int = 50,
        athlete_id: Optional[str] = None,
    ) -> tuple[list[Campaign], bool]:
        """
        Search live campaigns by name.

        Fetches one row past the page to tell whether another page exists.
        """
        clauses = ["is_deleted = FALSE"]
        params: list = []

        if search_term:
            clauses.append("name ILIKE %s")
            params.append(f"%{search_term}%")
        if athlete_id:
            clauses.append("athlete_id = %s")
            params.append(athlete_id)

        params.extend([page_size + 1, page * page_size])

        cursor = self._conn.cursor()
        try:
            cursor.execute(f"""
                SELECT {_CAMPAIGN_COLUMNS}
                FROM campaigns
                WHERE {" AND ".join(clauses)}
                ORDER BY name ASC
                LIMIT %s OFFSET %s
            """, tuple(params))

            rows = cursor.fetchall()
        finally:
            cursor.close()

        campaigns = [self._build_campaign(row) for row in rows[:page_size]]
        return campaigns, len(rows) > page_size

    def update(self, campaign_id: str, changes: dict) -> Campaign:
        cleaned = validate_campaign_changes(changes)
        if not cleaned:
            return self.get(campaign_id)

        assignments = ", ".join(f"{name} = %s" for name in cleaned)
        values = [
            value.value if isinstance(value, (CampaignType, CampaignStatus)) else value
            for value in cleaned.values()
        ]

        cursor = self._conn.cursor()
        try:
            cursor.execute(f"""
                UPDATE campaigns
                SET {assignments}
                WHERE id = %s AND is_deleted = FALSE
            """, tuple(values) + (campaign_id,))

            if cursor.rowcount == 0:
                raise CampaignNotFoundError(f"Campaign {campaign_id} not found")

            self._conn.commit()
        finally:
            cursor.close()

        return self.get(campaign_id)

    def soft_delete(self, campaign_id: str) -> None:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                UPDATE campaigns
                SET is_deleted = TRUE, deleted_at = %s
                WHERE id = %s AND is_deleted = FALSE
            """, (datetime.now(timezone.utc), campaign_id))

            if cursor.rowcount == 0:
                raise CampaignNotFoundError(f"Campaign {campaign_id} not found")

            self._conn.commit()
        finally:
            cursor.close()

        logger.info("Deleted campaign", extra={"campaign_id": campaign_id})

    def soft_delete_lead(self, lead_id: str) -> None:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                SELECT is_deleted FROM campaign_leads WHERE id = %s
            """, (lead_id,))

            row = cursor.fetchone()
            if not row:
                raise CampaignLeadNotFoundError("Campaign lead not found")
            if row[0]:
                return

            cursor.execute("""
                UPDATE campaign_leads
                SET is_deleted = TRUE, deleted_at = %s
                WHERE id = %s
            """, (datetime.now(timezone.utc), lead_id))
            self._conn.commit()

        finally:
            cursor.close()

    def _build_campaign(self, row) -> Campaign:
        return Campaign(
            id=str(row[0]),
            athlete_id=str(row[1]),
            name=row[2],
            type=CampaignType(row[3]),
            status=CampaignStatus(row[4]) if row[4] else CampaignStatus.DRAFT,
            primary_lead_list_id=row[5],
            seed_campaign_id=row[6],
            daily_send_cap=row[7],
            start_date=row[8],
            end_date=row[9],
            internal_notes=row[10],
            is_deleted=bool(row[11]),
            deleted_at=row[12],
            created_at=row[13],
        )


class SnowflakeLeadListStore:
    """Repository for `sending_tool_lead_lists`."""

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def create(self, lead_list: LeadList) -> LeadList:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO sending_tool_lead_lists (
                    id, campaign_id, format, file_url, row_count,
                    generated_by, generated_at, internal_notes
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """, (
                lead_list.id, lead_list.campaign_id, lead_list.format,
                lead_list.file_url, lead_list.row_count, lead_list.generated_by,
                lead_list.generated_at, lead_list.internal_notes,
            ))
            self._conn.commit()

        except Exception as e:
            logger.error(
                "Failed to record lead list",
                extra={"campaign_id": lead_list.campaign_id, "error": str(e)}
            )
            raise QueryError(str(e)) from e
        finally:
            cursor.close()

        return lead_list

    def list_for_campaign(self, campaign_id: str) -> list[LeadList]:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                SELECT id, campaign_id, format, file_url, row_count,
                       generated_by, generated_at, internal_notes
                FROM sending_tool_lead_lists
                WHERE campaign_id = %s
                ORDER BY generated_at DESC
            """, (campaign_id,))

            rows = cursor.fetchall()
        finally:
            cursor.close()

        return [
            LeadList(
                id=str(row[0]),
                campaign_id=str(row[1]),
                format=row[2] or "csv",
                file_url=row[3],
                row_count=row[4] or 0,
                generated_by=str(row[5]),
                generated_at=row[6],
                internal_notes=row[7],
            )
            for row in rows
        ]

    def delete(self, list_id: str) -> None:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM sending_tool_lead_lists WHERE id = %s
            """, (list_id,))
            self._conn.commit()
        finally:
            cursor.close()


class SnowflakeTeamDirectory:
    """Looks up the team member behind a logged-in user."""

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def find_team_member_id(self, user_id: str) -> Optional[str]:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                SELECT id
                FROM team_members
                WHERE user_id = %s AND is_deleted = FALSE
                LIMIT 1
            """, (user_id,))

            row = cursor.fetchone()
        except Exception as e:
            logger.error(
                "Team member lookup failed",
                extra={"user_id": user_id, "error": str(e)}
            )
            raise QueryError(str(e)) from e
        finally:
            cursor.close()

        return str(row[0]) if row else None

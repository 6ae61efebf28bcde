"""
Persistence contracts for campaigns, lead lists and team members.

Implemented by the Snowflake repositories and by in-memory stores for mock
mode and tests.
"""

from typing import Optional, Protocol

from .models import Campaign, LeadList, NewCampaign


class CampaignStore(Protocol):

    def create(self, new: NewCampaign) -> Campaign:
        ...

    def get(self, campaign_id: str) -> Campaign:
        """Load a live campaign. Raises CampaignNotFoundError."""
        ...

    def search(
        self,
        search_term: str = "",
        page: int = 0,
        page_size: int = 50,
        athlete_id: Optional[str] = None,
    ) -> tuple[list[Campaign], bool]:
        """Campaigns ordered by name, 0-indexed page. Returns (campaigns, has_more)."""
        ...

    def update(self, campaign_id: str, changes: dict) -> Campaign:
        ...

    def soft_delete(self, campaign_id: str) -> None:
        ...

    def soft_delete_lead(self, lead_id: str) -> None:
        """Soft-delete a campaign lead. Already-deleted leads are left alone."""
        ...


class LeadListStore(Protocol):

    def create(self, lead_list: LeadList) -> LeadList:
        ...

    def list_for_campaign(self, campaign_id: str) -> list[LeadList]:
        """Lead lists for a campaign, newest first."""
        ...

    def delete(self, list_id: str) -> None:
        ...


class TeamDirectory(Protocol):

    def find_team_member_id(self, user_id: str) -> Optional[str]:
        """Team member id for a logged-in user, or None."""
        ...

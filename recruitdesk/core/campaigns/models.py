"""
Domain models for recruiting campaigns and their sending-tool lead lists.

A campaign belongs to one athlete and targets coaches through campaign
leads. Exported coach lists are recorded as sending-tool lead lists so the
team can find the file again from the campaign page.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4


class CampaignType(Enum):
    TOP = "top"
    SECOND_PASS = "second_pass"
    THIRD_PASS = "third_pass"
    PERSONAL_BEST = "personal_best"

    @property
    def label(self) -> str:
        """Display name, e.g. "Second Pass"."""
        return self.value.replace("_", " ").title()


class CampaignStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    EXHAUSTED = "exhausted"

    @property
    def label(self) -> str:
        return self.value.title()


class CampaignNotFoundError(Exception):
    """Raised when a campaign doesn't exist or is soft-deleted."""
    pass


class CampaignLeadNotFoundError(Exception):
    """Raised when a campaign lead doesn't exist."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class NewCampaign:
    """
    Validated input for creating a campaign.

    Validation lives here rather than in the API layer so every caller
    (routes, scripts, tests) gets the same rules.
    """
    athlete_id: str
    name: str
    type: CampaignType
    status: CampaignStatus = CampaignStatus.DRAFT
    primary_lead_list_id: Optional[str] = None
    daily_send_cap: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    internal_notes: Optional[str] = None

    def __post_init__(self) -> None:
        self.type = CampaignType(self.type)
        self.status = CampaignStatus(self.status)
        if not self.name or not self.name.strip():
            raise ValueError("Campaign name is required")
        if self.daily_send_cap is not None and self.daily_send_cap <= 0:
            raise ValueError("Daily send cap must be a positive integer")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")


@dataclass
class Campaign:
    id: str
    athlete_id: str
    name: str
    type: CampaignType
    status: CampaignStatus = CampaignStatus.DRAFT
    primary_lead_list_id: Optional[str] = None
    seed_campaign_id: Optional[str] = None
    daily_send_cap: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    internal_notes: Optional[str] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_new(cls, new: NewCampaign) -> "Campaign":
        return cls(
            id=str(uuid4()),
            athlete_id=new.athlete_id,
            name=new.name.strip(),
            type=new.type,
            status=new.status,
            primary_lead_list_id=new.primary_lead_list_id,
            daily_send_cap=new.daily_send_cap,
            start_date=new.start_date,
            end_date=new.end_date,
            internal_notes=new.internal_notes,
        )


# Fields an update may change. Anything else is rejected.
UPDATABLE_CAMPAIGN_FIELDS = frozenset({
    "name",
    "type",
    "status",
    "primary_lead_list_id",
    "daily_send_cap",
    "start_date",
    "end_date",
    "internal_notes",
})


def validate_campaign_changes(changes: dict) -> dict:
    """Check an update payload and coerce enum fields."""
    unknown = set(changes) - UPDATABLE_CAMPAIGN_FIELDS
    if unknown:
        raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    cleaned = dict(changes)
    if "name" in cleaned:
        if not cleaned["name"] or not str(cleaned["name"]).strip():
            raise ValueError("Campaign name is required")
        cleaned["name"] = str(cleaned["name"]).strip()
    if "type" in cleaned:
        cleaned["type"] = CampaignType(cleaned["type"])
    if "status" in cleaned:
        cleaned["status"] = CampaignStatus(cleaned["status"])
    cap = cleaned.get("daily_send_cap")
    if cap is not None and cap <= 0:
        raise ValueError("Daily send cap must be a positive integer")
    return cleaned


@dataclass
class LeadList:
    """A generated sending-tool file attached to a campaign."""
    campaign_id: str
    file_url: str
    row_count: int
    generated_by: str
    format: str = "csv"
    internal_notes: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    generated_at: datetime = field(default_factory=_utcnow)

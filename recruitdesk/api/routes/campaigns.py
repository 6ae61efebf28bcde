"""
Campaign API endpoints.

CRUD over campaigns, plus the lead lists recorded by exports and the
campaign leads that tie coaches to a campaign. Unlike the coach export
routes these use plain HTTP status codes: 404 for missing records, 400 for
invalid input.
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from ...core.campaigns.models import (
    Campaign,
    CampaignLeadNotFoundError,
    CampaignNotFoundError,
    CampaignStatus,
    CampaignType,
    LeadList,
    NewCampaign,
)
from ..dependencies import ApiKey, CampaignStoreDep, LeadListStoreDep

logger = logging.getLogger(__name__)

router = APIRouter()
records_router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class CampaignCreateRequest(BaseModel):
    athlete_id: str
    name: str = Field(min_length=1, max_length=200)
    type: CampaignType
    status: CampaignStatus = CampaignStatus.DRAFT
    primary_lead_list_id: Optional[str] = None
    daily_send_cap: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    internal_notes: Optional[str] = None


class CampaignUpdateRequest(BaseModel):
    """Partial update. Only fields present in the body are changed."""
    name: Optional[str] = None
    type: Optional[CampaignType] = None
    status: Optional[CampaignStatus] = None
    primary_lead_list_id: Optional[str] = None
    daily_send_cap: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    internal_notes: Optional[str] = None


class CampaignResponse(BaseModel):
    id: str
    athlete_id: str
    name: str
    type: str
    type_label: str
    status: str
    status_label: str
    primary_lead_list_id: Optional[str] = None
    seed_campaign_id: Optional[str] = None
    daily_send_cap: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    internal_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_campaign(cls, campaign: Campaign) -> "CampaignResponse":
        return cls(
            id=campaign.id,
            athlete_id=campaign.athlete_id,
            name=campaign.name,
            type=campaign.type.value,
            type_label=campaign.type.label,
            status=campaign.status.value,
            status_label=campaign.status.label,
            primary_lead_list_id=campaign.primary_lead_list_id,
            seed_campaign_id=campaign.seed_campaign_id,
            daily_send_cap=campaign.daily_send_cap,
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            internal_notes=campaign.internal_notes,
            created_at=campaign.created_at,
        )


class CampaignSearchResponse(BaseModel):
    campaigns: list[CampaignResponse]
    page: int
    has_more: bool


class LeadListResponse(BaseModel):
    id: str
    campaign_id: str
    format: str
    file_url: str
    row_count: int
    generated_by: str
    generated_at: datetime
    internal_notes: Optional[str] = None

    @classmethod
    def from_lead_list(cls, lead_list: LeadList) -> "LeadListResponse":
        return cls(
            id=lead_list.id,
            campaign_id=lead_list.campaign_id,
            format=lead_list.format,
            file_url=lead_list.file_url,
            row_count=lead_list.row_count,
            generated_by=lead_list.generated_by,
            generated_at=lead_list.generated_at,
            internal_notes=lead_list.internal_notes,
        )


def _not_found(campaign_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Campaign {campaign_id} not found",
    )


# ---------------------------------------------------------------------------
# Campaign Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=CampaignResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create campaign",
)
def create_campaign(
    request: CampaignCreateRequest,
    api_key: ApiKey,
    store: CampaignStoreDep,
) -> CampaignResponse:
    try:
        new = NewCampaign(**request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    campaign = store.create(new)
    return CampaignResponse.from_campaign(campaign)


@router.get(
    "",
    response_model=CampaignSearchResponse,
    summary="Search campaigns",
    description="Live campaigns ordered by name, filtered by a name search term.",
)
def search_campaigns(
    api_key: ApiKey,
    store: CampaignStoreDep,
    search: str = Query(default="", description="Case-insensitive name search"),
    page: int = Query(default=0, ge=0, description="0-indexed page"),
    page_size: int = Query(default=50, ge=1, le=200),
    athlete_id: Optional[str] = Query(default=None),
) -> CampaignSearchResponse:
    campaigns, has_more = store.search(
        search_term=search,
        page=page,
        page_size=page_size,
        athlete_id=athlete_id,
    )
    return CampaignSearchResponse(
        campaigns=[CampaignResponse.from_campaign(c) for c in campaigns],
        page=page,
        has_more=has_more,
    )


@router.get(
    "/{campaign_id}",
    response_model=CampaignResponse,
    summary="Get campaign",
)
def get_campaign(
    campaign_id: str,
    api_key: ApiKey,
    store: CampaignStoreDep,
) -> CampaignResponse:
    try:
        campaign = store.get(campaign_id)
    except CampaignNotFoundError:
        raise _not_found(campaign_id)

    return CampaignResponse.from_campaign(campaign)


@router.patch(
    "/{campaign_id}",
    response_model=CampaignResponse,
    summary="Update campaign",
)
def update_campaign(
    campaign_id: str,
    request: CampaignUpdateRequest,
    api_key: ApiKey,
    store: CampaignStoreDep,
) -> CampaignResponse:
    try:
        campaign = store.update(campaign_id, request.model_dump(exclude_unset=True))
    except CampaignNotFoundError:
        raise _not_found(campaign_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return CampaignResponse.from_campaign(campaign)


@router.delete(
    "/{campaign_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete campaign",
    description="Soft delete: the campaign is hidden but kept in the database.",
)
def delete_campaign(
    campaign_id: str,
    api_key: ApiKey,
    store: CampaignStoreDep,
) -> None:
    try:
        store.soft_delete(campaign_id)
    except CampaignNotFoundError:
        raise _not_found(campaign_id)


@router.get(
    "/{campaign_id}/lead-lists",
    response_model=list[LeadListResponse],
    summary="List a campaign's lead lists",
    description="Exported files recorded on the campaign, newest first.",
)
def list_lead_lists(
    campaign_id: str,
    api_key: ApiKey,
    lead_lists: LeadListStoreDep,
) -> list[LeadListResponse]:
    return [
        LeadListResponse.from_lead_list(lead_list)
        for lead_list in lead_lists.list_for_campaign(campaign_id)
    ]


# ---------------------------------------------------------------------------
# Lead List and Campaign Lead Endpoints
# ---------------------------------------------------------------------------

@records_router.delete(
    "/lead-lists/{list_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete lead list",
)
def delete_lead_list(
    list_id: str,
    api_key: ApiKey,
    lead_lists: LeadListStoreDep,
) -> None:
    lead_lists.delete(list_id)
    logger.info("Deleted lead list", extra={"list_id": list_id})


@records_router.delete(
    "/campaign-leads/{lead_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove coach from campaign",
    description="Soft-deletes the campaign lead. Deleting an already-deleted lead succeeds.",
)
def delete_campaign_lead(
    lead_id: str,
    api_key: ApiKey,
    store: CampaignStoreDep,
) -> None:
    try:
        store.soft_delete_lead(lead_id)
    except CampaignLeadNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Campaign lead not found",
        )

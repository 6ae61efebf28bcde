"""
Recruiting campaigns and their sending-tool lead lists.
"""

from .models import (
    Campaign,
    CampaignLeadNotFoundError,
    CampaignNotFoundError,
    CampaignStatus,
    CampaignType,
    LeadList,
    NewCampaign,
)
from .stores import CampaignStore, LeadListStore, TeamDirectory

__all__ = [
    "Campaign",
    "CampaignLeadNotFoundError",
    "CampaignNotFoundError",
    "CampaignStatus",
    "CampaignType",
    "LeadList",
    "NewCampaign",
    "CampaignStore",
    "LeadListStore",
    "TeamDirectory",
]

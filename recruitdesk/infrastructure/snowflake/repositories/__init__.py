"""
Repository implementations for Snowflake.

Repositories translate between domain models and database rows.
"""

from .campaigns import (
    SnowflakeCampaignStore,
    SnowflakeLeadListStore,
    SnowflakeTeamDirectory,
)
from .coaches import SnowflakeCoachDirectory

__all__ = [
    "SnowflakeCampaignStore",
    "SnowflakeCoachDirectory",
    "SnowflakeLeadListStore",
    "SnowflakeTeamDirectory",
]

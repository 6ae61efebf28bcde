"""
FastAPI dependency injection.

Dependencies provide repositories, storage and configuration to route
handlers, so routes never build their own and tests can override them
through `app.dependency_overrides`.

In mock mode the in-memory directory, stores and storage client are shared
across requests so that created campaigns and exports persist for the life
of the process.
"""

import logging
from typing import Annotated, Generator, Optional

from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings, get_settings
from ..core.campaigns.stores import CampaignStore, LeadListStore, TeamDirectory
from ..core.coaches.directory import CoachDirectory
from ..core.coaches.export import CoachListExporter, ExportStorage
from ..infrastructure.memory import (
    InMemoryCampaignStore,
    InMemoryLeadListStore,
    InMemoryTeamDirectory,
    demo_directory,
)
from ..infrastructure.snowflake.client import SnowflakeConfig, get_snowflake_connection
from ..infrastructure.snowflake.repositories import (
    SnowflakeCampaignStore,
    SnowflakeCoachDirectory,
    SnowflakeLeadListStore,
    SnowflakeTeamDirectory,
)
from ..infrastructure.storage.client import StorageConfig, create_storage_client

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

# Global mock instances (shared across requests in mock mode)
_mock_storage_client = None
_mock_directory = None
_mock_campaign_store = None
_mock_lead_list_store = None
_mock_team_directory = None

MOCK_TEAM_MEMBER_ID = "mock-team-member"


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: str = Security(api_key_header),
) -> str:
    """
    Validate API key from request header.

    Raises 403 if key is invalid or missing.
    """
    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.api_keys_list:
        logger.warning(
            "Invalid API key attempt",
            extra={"key_prefix": api_key[:8]}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    """
    The logged-in user, as forwarded by the dashboard.

    None when the header is absent; the coach actions report that as
    "You must be logged in".
    """
    return x_user_id or None


# ---------------------------------------------------------------------------
# Repository Dependencies
# ---------------------------------------------------------------------------

def snowflake_config_from_settings(settings: Settings) -> SnowflakeConfig:
    return SnowflakeConfig(
        account=settings.snowflake_account,
        user=settings.snowflake_user,
        password=settings.snowflake_password or None,
        private_key_path=settings.snowflake_private_key_path,
        private_key_base64=settings.snowflake_private_key_base64,
        database=settings.snowflake_database,
        schema=settings.snowflake_schema,
        warehouse=settings.snowflake_warehouse,
        role=settings.snowflake_role,
    )


def get_coach_directory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[CoachDirectory, None, None]:
    """
    Provide the coach directory.

    A generator so the Snowflake connection is closed after the request.
    """
    global _mock_directory

    if settings.snowflake_mock_mode:
        if _mock_directory is None:
            _mock_directory = demo_directory()
            logger.info("Created shared in-memory coach directory")
        yield _mock_directory
    else:
        with get_snowflake_connection(snowflake_config_from_settings(settings)) as conn:
            yield SnowflakeCoachDirectory(conn)


def get_campaign_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[CampaignStore, None, None]:
    global _mock_campaign_store

    if settings.snowflake_mock_mode:
        if _mock_campaign_store is None:
            _mock_campaign_store = InMemoryCampaignStore()
            logger.info("Created shared in-memory campaign store")
        yield _mock_campaign_store
    else:
        with get_snowflake_connection(snowflake_config_from_settings(settings)) as conn:
            yield SnowflakeCampaignStore(conn)


def get_lead_list_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[LeadListStore, None, None]:
    global _mock_lead_list_store

    if settings.snowflake_mock_mode:
        if _mock_lead_list_store is None:
            _mock_lead_list_store = InMemoryLeadListStore()
            logger.info("Created shared in-memory lead list store")
        yield _mock_lead_list_store
    else:
        with get_snowflake_connection(snowflake_config_from_settings(settings)) as conn:
            yield SnowflakeLeadListStore(conn)


def get_team_directory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[TeamDirectory, None, None]:
    global _mock_team_directory

    if settings.snowflake_mock_mode:
        if _mock_team_directory is None:
            # No team table in mock mode, every user is the same member
            _mock_team_directory = InMemoryTeamDirectory(default_member_id=MOCK_TEAM_MEMBER_ID)
        yield _mock_team_directory
    else:
        with get_snowflake_connection(snowflake_config_from_settings(settings)) as conn:
            yield SnowflakeTeamDirectory(conn)


def get_storage_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ExportStorage:
    """
    Provide storage client for export uploads.

    Returns either R2 client or mock client based on settings.
    """
    global _mock_storage_client

    if settings.r2_mock_mode:
        if _mock_storage_client is None:
            _mock_storage_client = create_storage_client(mock_mode=True)
            logger.info("Created shared mock storage client")
        return _mock_storage_client

    config = StorageConfig(
        access_key_id=settings.r2_access_key_id,
        secret_access_key=settings.r2_secret_access_key,
        bucket_name=settings.r2_bucket_name,
        endpoint_url=settings.r2_endpoint,
    )
    return create_storage_client(config=config)


def get_coach_exporter(
    settings: Annotated[Settings, Depends(get_settings)],
    directory: Annotated[CoachDirectory, Depends(get_coach_directory)],
    storage: Annotated[ExportStorage, Depends(get_storage_client)],
    lead_lists: Annotated[LeadListStore, Depends(get_lead_list_store)],
    team: Annotated[TeamDirectory, Depends(get_team_directory)],
) -> CoachListExporter:
    return CoachListExporter(
        directory=directory,
        storage=storage,
        lead_lists=lead_lists,
        team=team,
        page_size=settings.export_page_size,
        url_ttl_seconds=settings.export_url_ttl_seconds,
        rollback_on_record_failure=settings.export_rollback_on_record_failure,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

ApiKey = Annotated[str, Depends(verify_api_key)]
CurrentUserId = Annotated[Optional[str], Depends(get_current_user_id)]
CoachDirectoryDep = Annotated[CoachDirectory, Depends(get_coach_directory)]
CampaignStoreDep = Annotated[CampaignStore, Depends(get_campaign_store)]
LeadListStoreDep = Annotated[LeadListStore, Depends(get_lead_list_store)]
CoachExporterDep = Annotated[CoachListExporter, Depends(get_coach_exporter)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

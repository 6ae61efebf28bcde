"""
Coach export API endpoints.

Thin HTTP wrappers over the coach export actions. Every response is an
action envelope with status 200:

    {"success": true, "data": ..., "pagination": ...}
    {"success": false, "error": "..."}

so the dashboard handles "not logged in", bad filters and database errors
the same way it handles a successful page.
"""

import logging
from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ...core.coaches.actions import (
    NOT_LOGGED_IN,
    export_coach_list_action,
    get_campaign_coach_filter_options_action,
    get_campaign_coaches_action,
)
from ...core.coaches.filters import (
    CoachFilters,
    FacetFilter,
    FacetSelection,
    FilterOperator,
    NumericFilter,
)
from ...core.coaches.models import ActionResult
from ..dependencies import (
    ApiKey,
    CoachDirectoryDep,
    CoachExporterDep,
    CurrentUserId,
    SettingsDep,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class FacetFilterModel(BaseModel):
    values: list[str] = Field(default_factory=list)
    operator: FilterOperator = FilterOperator.IS_ANY_OF


class NumericFilterModel(BaseModel):
    values: list[float]
    operator: FilterOperator = FilterOperator.IS


class CoachFiltersModel(BaseModel):
    """Operator-format filters, as sent by the coach table."""
    divisions: Optional[FacetFilterModel] = None
    universities: Optional[FacetFilterModel] = None
    programs: Optional[FacetFilterModel] = None
    tuition: Optional[NumericFilterModel] = None

    def to_filters(self) -> CoachFilters:
        """Raises ValueError for operators a facet does not support."""
        def facet(model: Optional[FacetFilterModel]) -> Optional[FacetFilter]:
            return FacetFilter(values=model.values, operator=model.operator) if model else None

        return CoachFilters(
            divisions=facet(self.divisions),
            universities=facet(self.universities),
            programs=facet(self.programs),
            tuition=(
                NumericFilter(values=self.tuition.values, operator=self.tuition.operator)
                if self.tuition else None
            ),
        )


class CoachSearchRequest(BaseModel):
    page: int = Field(default=1, description="1-indexed page number")
    page_size: Optional[int] = Field(default=None, description="Rows per page")
    filters: Optional[CoachFiltersModel] = None
    coach_ids: Optional[list[str]] = Field(
        default=None,
        description="Keep only these coaches. Applied to the fetched page.",
    )


class FilterOptionsRequest(BaseModel):
    divisions: list[str] = Field(default_factory=list)
    universities: list[str] = Field(default_factory=list)
    programs: list[str] = Field(default_factory=list)


class ExportRequest(BaseModel):
    """
    Export selection.

    Accepts either operator-format `filters` or the simple format
    (plain id lists plus tuition bounds). `filters` wins when both are sent.
    """
    coach_ids: Optional[list[str]] = None
    filters: Optional[CoachFiltersModel] = None
    divisions: Optional[list[str]] = None
    universities: Optional[list[str]] = None
    programs: Optional[list[str]] = None
    min_tuition: Optional[float] = None
    max_tuition: Optional[float] = None

    def to_filters(self) -> Optional[CoachFilters]:
        if self.filters is not None:
            return self.filters.to_filters()
        return CoachFilters.from_simple(
            divisions=self.divisions,
            universities=self.universities,
            programs=self.programs,
            min_tuition=self.min_tuition,
            max_tuition=self.max_tuition,
        )


def envelope(result: ActionResult) -> dict[str, Any]:
    """Serialize an action result, leaving out empty envelope fields."""
    return {key: value for key, value in asdict(result).items() if value is not None}


def _not_logged_in() -> dict[str, Any]:
    return envelope(ActionResult.failure(NOT_LOGGED_IN))


def _invalid_filters(error: ValueError) -> dict[str, Any]:
    return envelope(ActionResult(success=False, error=str(error), validation_errors=[str(error)]))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/campaigns/{campaign_id}/coaches/search",
    status_code=status.HTTP_200_OK,
    summary="Search coaches for a campaign",
    description="One page of coaches matching the filters, flattened one row per job.",
)
def search_campaign_coaches(
    campaign_id: str,
    request: CoachSearchRequest,
    api_key: ApiKey,
    user_id: CurrentUserId,
    directory: CoachDirectoryDep,
    settings: SettingsDep,
) -> dict[str, Any]:
    if not user_id:
        return _not_logged_in()

    try:
        filters = request.filters.to_filters() if request.filters else None
    except ValueError as e:
        return _invalid_filters(e)

    result = get_campaign_coaches_action(
        directory,
        user_id=user_id,
        campaign_id=campaign_id,
        page=request.page,
        page_size=request.page_size or settings.default_page_size,
        filters=filters,
        coach_ids=request.coach_ids,
    )
    return envelope(result)


@router.post(
    "/coaches/filter-options",
    status_code=status.HTTP_200_OK,
    summary="Filter option counts",
    description="Division, university and program options with coach counts.",
)
def coach_filter_options(
    request: FilterOptionsRequest,
    api_key: ApiKey,
    user_id: CurrentUserId,
    directory: CoachDirectoryDep,
) -> dict[str, Any]:
    result = get_campaign_coach_filter_options_action(
        directory,
        user_id=user_id,
        selection=FacetSelection(
            divisions=request.divisions,
            universities=request.universities,
            programs=request.programs,
        ),
    )
    return envelope(result)


@router.post(
    "/campaigns/{campaign_id}/exports",
    status_code=status.HTTP_200_OK,
    summary="Export coaches to CSV",
    description=(
        "Render matching coaches as CSV, upload it, and record it as a "
        "sending-tool lead list on the campaign."
    ),
)
async def export_campaign_coaches(
    campaign_id: str,
    request: ExportRequest,
    api_key: ApiKey,
    user_id: CurrentUserId,
    exporter: CoachExporterDep,
) -> dict[str, Any]:
    if not user_id:
        return _not_logged_in()

    try:
        filters = request.to_filters()
    except ValueError as e:
        return _invalid_filters(e)

    logger.info(
        "Export requested",
        extra={
            "campaign_id": campaign_id,
            "coach_ids": len(request.coach_ids or []),
            "filtered": filters is not None,
        }
    )

    result = await export_coach_list_action(
        exporter,
        user_id=user_id,
        campaign_id=campaign_id,
        coach_ids=request.coach_ids,
        filters=filters,
    )
    return envelope(result)

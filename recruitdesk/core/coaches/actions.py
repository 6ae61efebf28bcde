"""
Coach export actions.

These are the entry points the API calls. Each one checks that a user is
logged in, runs the component, and turns expected failures into an
`ActionResult` instead of raising:

- not logged in            -> error "You must be logged in"
- bad paging / filter input -> error with the validation message
- database error           -> logged, error with the message
- filters match nothing    -> success with an empty page
"""

import logging
from typing import Optional, Sequence

from .composer import CoachQueryComposer
from .directory import CoachDirectory, QueryError
from .export import CoachListExporter, ExportError
from .filter_options import FilterOptionsAggregator
from .filters import CoachFilters, FacetSelection
from .models import ActionResult

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = "You must be logged in"


def get_campaign_coaches_action(
    directory: CoachDirectory,
    user_id: Optional[str],
    campaign_id: str,
    page: int = 1,
    page_size: int = 50,
    filters: Optional[CoachFilters] = None,
    coach_ids: Optional[Sequence[str]] = None,
) -> ActionResult:
    """One page of coaches for a campaign's export table."""
    if not user_id:
        return ActionResult.failure(NOT_LOGGED_IN)

    try:
        result = CoachQueryComposer(directory).get_page(
            page=page,
            page_size=page_size,
            filters=filters,
            coach_ids=coach_ids,
        )
    except ValueError as e:
        return ActionResult(success=False, error=str(e), validation_errors=[str(e)])
    except QueryError as e:
        logger.error(
            "Error fetching coaches",
            extra={"campaign_id": campaign_id, "error": str(e)}
        )
        return ActionResult.failure(str(e))

    return ActionResult.ok(result.records, pagination=result.pagination)


def get_campaign_coach_filter_options_action(
    directory: CoachDirectory,
    user_id: Optional[str],
    selection: Optional[FacetSelection] = None,
) -> ActionResult:
    """Option counts for the division, university and program dropdowns."""
    if not user_id:
        return ActionResult.failure(NOT_LOGGED_IN)

    options = FilterOptionsAggregator(directory).collect(selection or FacetSelection())
    return ActionResult.ok(options)


async def export_coach_list_action(
    exporter: CoachListExporter,
    user_id: Optional[str],
    campaign_id: str,
    coach_ids: Optional[Sequence[str]] = None,
    filters: Optional[CoachFilters] = None,
) -> ActionResult:
    """Export matching coaches to CSV, upload it, and record it on the campaign."""
    if not user_id:
        return ActionResult.failure(NOT_LOGGED_IN)

    try:
        result = await exporter.export(
            user_id=user_id,
            campaign_id=campaign_id,
            coach_ids=coach_ids,
            filters=filters,
        )
    except ExportError as e:
        logger.error(
            "Coach export failed",
            extra={"campaign_id": campaign_id, "error": str(e)}
        )
        return ActionResult(success=False, server_error=str(e))

    return ActionResult.ok(result)

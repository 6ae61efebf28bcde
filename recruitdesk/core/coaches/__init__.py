"""
Campaign coach export: filtering, paging, flattening and CSV rendering.
"""

from .actions import (
    export_coach_list_action,
    get_campaign_coach_filter_options_action,
    get_campaign_coaches_action,
)
from .composer import CoachQueryComposer
from .csv_export import escape_csv, generate_csv, map_division_to_code
from .directory import CoachDirectory, CostCondition, JobQuery, QueryError
from .export import CoachListExporter, ExportError, ExportResult, StorageError
from .filter_options import FilterOptionsAggregator
from .filters import (
    CoachFilters,
    FacetFilter,
    FacetSelection,
    FilterOperator,
    NumericFilter,
)
from .models import (
    ActionResult,
    CampaignCoachData,
    Coach,
    CoachPage,
    Conference,
    FilterOptions,
    Pagination,
    Program,
    University,
    UniversityJob,
)

__all__ = [
    "export_coach_list_action",
    "get_campaign_coach_filter_options_action",
    "get_campaign_coaches_action",
    "CoachQueryComposer",
    "escape_csv",
    "generate_csv",
    "map_division_to_code",
    "CoachDirectory",
    "CostCondition",
    "JobQuery",
    "QueryError",
    "CoachListExporter",
    "ExportError",
    "ExportResult",
    "StorageError",
    "FilterOptionsAggregator",
    "CoachFilters",
    "FacetFilter",
    "FacetSelection",
    "FilterOperator",
    "NumericFilter",
    "ActionResult",
    "CampaignCoachData",
    "Coach",
    "CoachPage",
    "Conference",
    "FilterOptions",
    "Pagination",
    "Program",
    "University",
    "UniversityJob",
]

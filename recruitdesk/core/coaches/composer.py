"""
Coach query composition.

Builds one `JobQuery` from the resolved university scope and the program
filter, then runs the count query and the ranged data query with that same
predicate. Sharing the predicate object keeps the two queries from drifting:
a filter added to one is automatically applied to the other.
"""

import logging
import math
from typing import Optional, Sequence

from .directory import CoachDirectory, JobQuery
from .filters import CoachFilters
from .flatten import flatten_jobs
from .models import CoachPage, Pagination
from .resolver import resolve_university_scope

logger = logging.getLogger(__name__)


def build_job_query(
    included: Optional[set[str]],
    excluded: set[str],
    filters: Optional[CoachFilters],
) -> JobQuery:
    program_ids = None
    excluded_programs: frozenset[str] = frozenset()

    programs = filters.programs if filters else None
    if programs and programs.is_active:
        if programs.is_negated:
            excluded_programs = frozenset(programs.values)
        else:
            program_ids = frozenset(programs.values)

    return JobQuery(
        university_ids=frozenset(included) if included is not None else None,
        excluded_university_ids=frozenset(excluded),
        program_ids=program_ids,
        excluded_program_ids=excluded_programs,
    )


class CoachQueryComposer:
    """
    Fetches pages of flattened coach records for a filter set.

    Ordering is by job id ascending. That is stable, not meaningful to the
    user; it only exists so offset pagination is deterministic.
    """

    def __init__(self, directory: CoachDirectory) -> None:
        self._directory = directory

    def get_page(
        self,
        page: int = 1,
        page_size: int = 50,
        filters: Optional[CoachFilters] = None,
        coach_ids: Optional[Sequence[str]] = None,
    ) -> CoachPage:
        """
        Return one page of coach records.

        `coach_ids` narrows the fetched page after the query runs. Coaches
        outside the current page are not brought in.
        """
        if page < 1:
            raise ValueError("page must be 1 or greater")
        if page_size < 1:
            raise ValueError("page_size must be 1 or greater")

        scope = resolve_university_scope(self._directory, filters)
        if scope.is_empty:
            logger.info("Filters resolved to no universities, returning empty page")
            return CoachPage(
                records=[],
                pagination=Pagination(page=page, page_size=page_size, total_count=0, total_pages=0),
            )

        query = build_job_query(scope.included, scope.excluded, filters)

        total = self._directory.count_jobs(query)
        jobs = self._directory.fetch_jobs(query, offset=(page - 1) * page_size, limit=page_size)
        records = flatten_jobs(jobs)

        if coach_ids:
            allowed = set(coach_ids)
            records = [record for record in records if record.coach_id in allowed]

        logger.debug(
            "Fetched coach page",
            extra={
                "page": page,
                "page_size": page_size,
                "total_count": total,
                "returned": len(records),
            }
        )

        return CoachPage(
            records=records,
            pagination=Pagination(
                page=page,
                page_size=page_size,
                total_count=total,
                total_pages=math.ceil(total / page_size),
            ),
        )

"""
Filter option aggregation for the coach export table.

Each facet's option list is counted against the *other* active facets, never
against itself, so selecting a division does not hide the remaining
divisions from the dropdown.

Counting is best-effort per facet: if one facet's query fails it is logged
and that list comes back empty, while the other facets are still returned.
A broken facet should degrade the filter UI, not block it.
"""

import logging
from typing import Callable, TypeVar

from .directory import CoachDirectory, QueryError
from .filters import FacetSelection
from .models import (
    DivisionOption,
    Facet,
    FilterOptions,
    ProgramOption,
    UniversityOption,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FilterOptionsAggregator:
    """Collects division, university and program option counts."""

    def __init__(self, directory: CoachDirectory) -> None:
        self._directory = directory

    def collect(self, selection: FacetSelection) -> FilterOptions:
        divisions = self._best_effort(
            Facet.DIVISIONS,
            lambda: [
                DivisionOption(name=name, count=count)
                for name, count in self._directory.division_counts(
                    selection.without(Facet.DIVISIONS)
                )
            ],
        )
        universities = self._best_effort(
            Facet.UNIVERSITIES,
            lambda: [
                UniversityOption(id=university_id, name=name, count=count)
                for university_id, name, count in self._directory.university_counts(
                    selection.without(Facet.UNIVERSITIES)
                )
            ],
        )
        programs = self._best_effort(
            Facet.PROGRAMS,
            lambda: [
                ProgramOption(id=program_id, name=name, university_id=university_id, count=count)
                for program_id, name, university_id, count in self._directory.program_counts(
                    selection.without(Facet.PROGRAMS)
                )
            ],
        )

        return FilterOptions(
            divisions=sorted(divisions, key=lambda option: option.name.lower()),
            universities=sorted(universities, key=lambda option: option.name.lower()),
            programs=sorted(programs, key=lambda option: option.name.lower()),
        )

    def _best_effort(self, facet: Facet, fetch: Callable[[], list[T]]) -> list[T]:
        try:
            return fetch()
        except QueryError as e:
            logger.error(
                "Failed to count filter options",
                extra={"facet": facet.value, "error": str(e)}
            )
            return []

"""
Read-only data access contract for the coach export.

The resolver, composer and aggregator only talk to a `CoachDirectory`.
The Snowflake repository implements it with SQL; the in-memory directory
implements it over Python lists for mock mode and tests. Both must give the
same answers for the same inputs.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from .filters import FacetSelection
from .models import UniversityJob


class QueryError(Exception):
    """Raised when a directory query fails."""
    pass


COST_COMPARATORS = frozenset({"=", "<>", "<", "<=", ">", ">=", "between"})


@dataclass(frozen=True)
class CostCondition:
    """
    One comparison against `universities.total_yearly_cost`.

    `between` uses both values (inclusive); every other comparator uses
    only `value`. Universities with no cost never match.
    """
    comparator: str
    value: float
    upper: Optional[float] = None

    def __post_init__(self) -> None:
        if self.comparator not in COST_COMPARATORS:
            raise ValueError(f"Unsupported cost comparator: {self.comparator}")
        if self.comparator == "between" and self.upper is None:
            raise ValueError("'between' needs an upper bound")

    def matches(self, cost: Optional[float]) -> bool:
        if cost is None:
            return False
        if self.comparator == "between":
            return self.value <= cost <= self.upper
        return {
            "=": cost == self.value,
            "<>": cost != self.value,
            "<": cost < self.value,
            "<=": cost <= self.value,
            ">": cost > self.value,
            ">=": cost >= self.value,
        }[self.comparator]


@dataclass(frozen=True)
class JobQuery:
    """
    The predicate shared by the count query and the data query.

    Always restricted to live jobs (`is_deleted = false`) that have a coach.
    `university_ids=None` means "no university restriction"; an empty set
    means "nothing matches".
    """
    university_ids: Optional[frozenset[str]] = None
    excluded_university_ids: frozenset[str] = field(default_factory=frozenset)
    program_ids: Optional[frozenset[str]] = None
    excluded_program_ids: frozenset[str] = field(default_factory=frozenset)

    def matches(self, job: UniversityJob) -> bool:
        """
        Evaluate the predicate against a job (used by in-memory stores).

        Follows SQL NOT IN: a NULL column never passes a non-empty exclusion.
        """
        if job.is_deleted or job.coach_id is None:
            return False
        if self.university_ids is not None and job.university_id not in self.university_ids:
            return False
        if self.excluded_university_ids and (
            job.university_id is None or job.university_id in self.excluded_university_ids
        ):
            return False
        if self.program_ids is not None and job.program_id not in self.program_ids:
            return False
        if self.excluded_program_ids and (
            job.program_id is None or job.program_id in self.excluded_program_ids
        ):
            return False
        return True


class CoachDirectory(Protocol):
    """
    Protocol for the coach/job/university data the export reads.

    Every method raises QueryError when the underlying store fails.
    """

    def university_ids_for_divisions(self, division_names: list[str]) -> set[str]:
        """Universities holding at least one of the named divisions."""
        ...

    def university_ids_by_cost(
        self,
        condition: CostCondition,
        scope: Optional[set[str]] = None,
    ) -> set[str]:
        """Universities whose yearly cost satisfies the condition, within scope if given."""
        ...

    def count_jobs(self, query: JobQuery) -> int:
        ...

    def fetch_jobs(self, query: JobQuery, offset: int, limit: int) -> list[UniversityJob]:
        """Jobs matching the query ordered by job id, with relations resolved."""
        ...

    def division_counts(self, selection: FacetSelection) -> list[tuple[str, int]]:
        """(division name, job count) for jobs matching the selection."""
        ...

    def university_counts(self, selection: FacetSelection) -> list[tuple[str, str, int]]:
        """(university id, university name, job count)."""
        ...

    def program_counts(self, selection: FacetSelection) -> list[tuple[str, str, str, int]]:
        """(program id, program name, university id, job count)."""
        ...

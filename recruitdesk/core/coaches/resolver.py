"""
University-id resolution for the coach export.

Division, tuition and explicit university filters all narrow the export by
university. This module turns them into two id sets:

- included: universities a job must belong to (None = unrestricted).
  Every active inclusion facet intersects into it.
- excluded: universities a job must not belong to. Negated facets union
  into it and never touch `included`.

When an inclusion facet resolves to nothing, resolution stops and the scope
is marked empty. The caller then returns an empty page without running the
join query.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .directory import CoachDirectory, CostCondition
from .filters import CoachFilters, FilterOperator, NumericFilter

logger = logging.getLogger(__name__)


@dataclass
class UniversityScope:
    included: Optional[set[str]] = None
    excluded: set[str] = field(default_factory=set)
    is_empty: bool = False

    def narrow(self, ids: set[str]) -> None:
        """Intersect an inclusion set into the scope."""
        self.included = set(ids) if self.included is None else self.included & ids
        if not self.included:
            self.is_empty = True

    @classmethod
    def empty(cls) -> "UniversityScope":
        return cls(included=set(), is_empty=True)


def cost_conditions(tuition: NumericFilter) -> list[CostCondition]:
    """
    Map a tuition filter to cost conditions.

    Each condition is one query; results are unioned. "is not between"
    needs two (below the range, above the range).
    """
    op = tuition.operator
    value = tuition.values[0]

    if op is FilterOperator.IS_BETWEEN:
        low, high = tuition.bounds
        return [CostCondition("between", low, high)]
    if op is FilterOperator.IS_NOT_BETWEEN:
        low, high = tuition.bounds
        return [CostCondition("<", low), CostCondition(">", high)]

    comparators = {
        FilterOperator.IS: "=",
        FilterOperator.IS_NOT: "<>",
        FilterOperator.IS_LESS_THAN: "<",
        FilterOperator.IS_LESS_THAN_OR_EQUAL_TO: "<=",
        FilterOperator.IS_GREATER_THAN: ">",
        FilterOperator.IS_GREATER_THAN_OR_EQUAL_TO: ">=",
    }
    return [CostCondition(comparators[op], value)]


def resolve_university_scope(
    directory: CoachDirectory,
    filters: Optional[CoachFilters],
) -> UniversityScope:
    """
    Resolve university-level filters into included/excluded id sets.

    Order: explicit universities, divisions, tuition. Tuition lookups are
    scoped to the explicit university selection when there is one.
    """
    scope = UniversityScope()
    if filters is None:
        return scope

    selected: Optional[set[str]] = None
    universities = filters.universities
    if universities and universities.is_active:
        if universities.is_negated:
            scope.excluded |= set(universities.values)
        else:
            selected = set(universities.values)
            scope.narrow(selected)

    divisions = filters.divisions
    if divisions and divisions.is_active:
        matched = directory.university_ids_for_divisions(list(divisions.values))
        if divisions.is_negated:
            scope.excluded |= matched
        elif not matched:
            logger.info(
                "Division filter matched no universities",
                extra={"divisions": divisions.values}
            )
            return UniversityScope.empty()
        else:
            scope.narrow(matched)
            if scope.is_empty:
                return UniversityScope.empty()

    if filters.tuition:
        matched = set()
        for condition in cost_conditions(filters.tuition):
            matched |= directory.university_ids_by_cost(condition, scope=selected)
        if not matched:
            logger.info(
                "Tuition filter matched no universities",
                extra={
                    "operator": filters.tuition.operator.value,
                    "values": filters.tuition.values,
                }
            )
            return UniversityScope.empty()
        scope.narrow(matched)

    if scope.is_empty:
        return UniversityScope.empty()

    return scope

"""
Filter selections for the coach export.

Two shapes exist:
- The operator format used by the table view: each facet carries a value
  list and an operator ("is any of", "is not between", ...).
- The simple format used by the export dialog: plain id lists plus
  optional tuition bounds. `CoachFilters.from_simple` converts it.

Operators are validated when a filter is built, so the resolver and the
repositories only ever see combinations they know how to query.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from .models import Facet


class FilterOperator(str, Enum):
    IS = "is"
    IS_ANY_OF = "is any of"
    IS_NOT = "is not"
    IS_NONE_OF = "is none of"
    IS_BETWEEN = "is between"
    IS_NOT_BETWEEN = "is not between"
    IS_LESS_THAN = "is less than"
    IS_LESS_THAN_OR_EQUAL_TO = "is less than or equal to"
    IS_GREATER_THAN = "is greater than"
    IS_GREATER_THAN_OR_EQUAL_TO = "is greater than or equal to"


INCLUSION_OPERATORS = frozenset({FilterOperator.IS, FilterOperator.IS_ANY_OF})
NEGATION_OPERATORS = frozenset({FilterOperator.IS_NOT, FilterOperator.IS_NONE_OF})
FACET_OPERATORS = INCLUSION_OPERATORS | NEGATION_OPERATORS

RANGE_OPERATORS = frozenset({FilterOperator.IS_BETWEEN, FilterOperator.IS_NOT_BETWEEN})
NUMERIC_OPERATORS = frozenset({
    FilterOperator.IS,
    FilterOperator.IS_NOT,
    FilterOperator.IS_BETWEEN,
    FilterOperator.IS_NOT_BETWEEN,
    FilterOperator.IS_LESS_THAN,
    FilterOperator.IS_LESS_THAN_OR_EQUAL_TO,
    FilterOperator.IS_GREATER_THAN,
    FilterOperator.IS_GREATER_THAN_OR_EQUAL_TO,
})


@dataclass
class FacetFilter:
    """
    A set-valued filter (divisions, universities, programs).

    Inclusion operators keep rows matching any value; negation operators
    drop rows matching any value.
    """
    values: list[str]
    operator: FilterOperator = FilterOperator.IS_ANY_OF

    def __post_init__(self) -> None:
        self.operator = FilterOperator(self.operator)
        if self.operator not in FACET_OPERATORS:
            raise ValueError(
                f"Operator '{self.operator.value}' is not valid for a set filter"
            )

    @property
    def is_active(self) -> bool:
        return bool(self.values)

    @property
    def is_negated(self) -> bool:
        return self.operator in NEGATION_OPERATORS


@dataclass
class NumericFilter:
    """A numeric comparison filter (tuition)."""
    values: list[float]
    operator: FilterOperator = FilterOperator.IS

    def __post_init__(self) -> None:
        self.operator = FilterOperator(self.operator)
        if self.operator not in NUMERIC_OPERATORS:
            raise ValueError(
                f"Operator '{self.operator.value}' is not valid for a numeric filter"
            )
        required = 2 if self.operator in RANGE_OPERATORS else 1
        if len(self.values) < required:
            raise ValueError(
                f"Operator '{self.operator.value}' needs {required} value(s)"
            )

    @property
    def bounds(self) -> tuple[float, float]:
        """Lower and upper bound of a range operator."""
        low, high = self.values[0], self.values[1]
        return (low, high) if low <= high else (high, low)


@dataclass
class CoachFilters:
    divisions: Optional[FacetFilter] = None
    universities: Optional[FacetFilter] = None
    programs: Optional[FacetFilter] = None
    tuition: Optional[NumericFilter] = None

    @property
    def is_empty(self) -> bool:
        return not any((
            self.divisions and self.divisions.is_active,
            self.universities and self.universities.is_active,
            self.programs and self.programs.is_active,
            self.tuition,
        ))

    @classmethod
    def from_simple(
        cls,
        divisions: Optional[Sequence[str]] = None,
        universities: Optional[Sequence[str]] = None,
        programs: Optional[Sequence[str]] = None,
        min_tuition: Optional[float] = None,
        max_tuition: Optional[float] = None,
    ) -> Optional["CoachFilters"]:
        """
        Convert the export dialog's plain selections to operator filters.

        One value becomes "is", several become "is any of". Tuition becomes
        "is between" when both bounds are given, otherwise a one-sided
        inclusive comparison. Returns None when nothing is selected.
        """
        filters = cls(
            divisions=_simple_facet(divisions),
            universities=_simple_facet(universities),
            programs=_simple_facet(programs),
        )

        if min_tuition is not None and max_tuition is not None:
            filters.tuition = NumericFilter(
                values=[min_tuition, max_tuition],
                operator=FilterOperator.IS_BETWEEN,
            )
        elif min_tuition is not None:
            filters.tuition = NumericFilter(
                values=[min_tuition],
                operator=FilterOperator.IS_GREATER_THAN_OR_EQUAL_TO,
            )
        elif max_tuition is not None:
            filters.tuition = NumericFilter(
                values=[max_tuition],
                operator=FilterOperator.IS_LESS_THAN_OR_EQUAL_TO,
            )

        return None if filters.is_empty else filters


def _simple_facet(values: Optional[Sequence[str]]) -> Optional[FacetFilter]:
    if not values:
        return None
    operator = FilterOperator.IS_ANY_OF if len(values) > 1 else FilterOperator.IS
    return FacetFilter(values=list(values), operator=operator)


@dataclass
class FacetSelection:
    """
    Already-chosen values used to condition the filter option counts.

    Plain value lists with inclusion semantics, one per set facet.
    """
    divisions: list[str] = field(default_factory=list)
    universities: list[str] = field(default_factory=list)
    programs: list[str] = field(default_factory=list)

    def without(self, facet: Facet) -> "FacetSelection":
        """Copy of this selection with one facet cleared."""
        return FacetSelection(
            divisions=[] if facet is Facet.DIVISIONS else list(self.divisions),
            universities=[] if facet is Facet.UNIVERSITIES else list(self.universities),
            programs=[] if facet is Facet.PROGRAMS else list(self.programs),
        )

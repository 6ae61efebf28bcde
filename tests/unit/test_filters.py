"""
Unit tests for filter selections and their conversion from the simple format.
"""

import pytest

from recruitdesk.core.coaches.directory import CostCondition
from recruitdesk.core.coaches.filters import (
    CoachFilters,
    FacetFilter,
    FacetSelection,
    FilterOperator,
    NumericFilter,
)
from recruitdesk.core.coaches.models import Facet


class TestFacetFilter:

    def test_defaults_to_is_any_of(self):
        facet = FacetFilter(values=["u-1"])
        assert facet.operator is FilterOperator.IS_ANY_OF
        assert facet.is_active
        assert not facet.is_negated

    def test_accepts_operator_strings(self):
        facet = FacetFilter(values=["u-1"], operator="is none of")
        assert facet.operator is FilterOperator.IS_NONE_OF
        assert facet.is_negated

    def test_rejects_range_operator(self):
        """Set facets only support inclusion and negation."""
        with pytest.raises(ValueError, match="not valid for a set filter"):
            FacetFilter(values=["NCAA Division I"], operator=FilterOperator.IS_BETWEEN)

    def test_empty_values_is_inactive(self):
        assert not FacetFilter(values=[]).is_active


class TestNumericFilter:

    def test_between_needs_two_values(self):
        with pytest.raises(ValueError, match="needs 2 value"):
            NumericFilter(values=[1000], operator=FilterOperator.IS_BETWEEN)

    def test_comparison_needs_one_value(self):
        with pytest.raises(ValueError, match="needs 1 value"):
            NumericFilter(values=[], operator=FilterOperator.IS_LESS_THAN)

    def test_rejects_set_operator(self):
        with pytest.raises(ValueError):
            NumericFilter(values=[1, 2], operator=FilterOperator.IS_ANY_OF)

    def test_bounds_are_ordered(self):
        tuition = NumericFilter(values=[40000, 10000], operator=FilterOperator.IS_BETWEEN)
        assert tuition.bounds == (10000, 40000)


class TestSimpleFormatConversion:

    def test_nothing_selected_returns_none(self):
        assert CoachFilters.from_simple() is None
        assert CoachFilters.from_simple(divisions=[], universities=[]) is None

    def test_single_value_becomes_is(self):
        filters = CoachFilters.from_simple(divisions=["NCAA Division I"])
        assert filters.divisions.operator is FilterOperator.IS
        assert filters.divisions.values == ["NCAA Division I"]

    def test_several_values_become_is_any_of(self):
        filters = CoachFilters.from_simple(universities=["u-1", "u-2"])
        assert filters.universities.operator is FilterOperator.IS_ANY_OF

    def test_both_tuition_bounds_become_between(self):
        filters = CoachFilters.from_simple(min_tuition=10000, max_tuition=30000)
        assert filters.tuition.operator is FilterOperator.IS_BETWEEN
        assert filters.tuition.values == [10000, 30000]

    def test_min_tuition_only_is_inclusive_lower_bound(self):
        filters = CoachFilters.from_simple(min_tuition=10000)
        assert filters.tuition.operator is FilterOperator.IS_GREATER_THAN_OR_EQUAL_TO

    def test_max_tuition_only_is_inclusive_upper_bound(self):
        filters = CoachFilters.from_simple(max_tuition=30000)
        assert filters.tuition.operator is FilterOperator.IS_LESS_THAN_OR_EQUAL_TO

    def test_zero_tuition_bound_is_kept(self):
        filters = CoachFilters.from_simple(min_tuition=0)
        assert filters is not None
        assert filters.tuition.values == [0]


class TestFacetSelection:

    def test_without_clears_only_that_facet(self):
        selection = FacetSelection(
            divisions=["NAIA"], universities=["u-1"], programs=["p-1"]
        )

        without_divisions = selection.without(Facet.DIVISIONS)

        assert without_divisions.divisions == []
        assert without_divisions.universities == ["u-1"]
        assert without_divisions.programs == ["p-1"]
        assert selection.divisions == ["NAIA"]


class TestCostCondition:

    def test_null_cost_never_matches(self):
        for comparator in ("=", "<>", "<", "<=", ">", ">="):
            assert not CostCondition(comparator, 100).matches(None)
        assert not CostCondition("between", 0, 100).matches(None)

    def test_between_is_inclusive(self):
        condition = CostCondition("between", 10, 20)
        assert condition.matches(10)
        assert condition.matches(20)
        assert not condition.matches(21)

    def test_rejects_unknown_comparator(self):
        with pytest.raises(ValueError):
            CostCondition("like", 10)

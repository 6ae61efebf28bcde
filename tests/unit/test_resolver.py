"""
Unit tests for university scope resolution.
"""

from recruitdesk.core.coaches.directory import CostCondition
from recruitdesk.core.coaches.filters import (
    CoachFilters,
    FacetFilter,
    FilterOperator,
    NumericFilter,
)
from recruitdesk.core.coaches.resolver import cost_conditions, resolve_university_scope


class TestCostConditions:

    def test_comparison_operators_map_to_sql_comparators(self):
        expected = {
            FilterOperator.IS: "=",
            FilterOperator.IS_NOT: "<>",
            FilterOperator.IS_LESS_THAN: "<",
            FilterOperator.IS_LESS_THAN_OR_EQUAL_TO: "<=",
            FilterOperator.IS_GREATER_THAN: ">",
            FilterOperator.IS_GREATER_THAN_OR_EQUAL_TO: ">=",
        }
        for operator, comparator in expected.items():
            conditions = cost_conditions(NumericFilter(values=[100], operator=operator))
            assert conditions == [CostCondition(comparator, 100)]

    def test_between_is_one_inclusive_range(self):
        conditions = cost_conditions(
            NumericFilter(values=[100, 200], operator=FilterOperator.IS_BETWEEN)
        )
        assert conditions == [CostCondition("between", 100, 200)]

    def test_not_between_is_two_strict_conditions(self):
        conditions = cost_conditions(
            NumericFilter(values=[100, 200], operator=FilterOperator.IS_NOT_BETWEEN)
        )
        assert conditions == [CostCondition("<", 100), CostCondition(">", 200)]


class TestResolveUniversityScope:

    def test_no_filters_is_unrestricted(self, directory):
        scope = resolve_university_scope(directory, None)
        assert scope.included is None
        assert scope.excluded == set()
        assert not scope.is_empty

    def test_division_inclusion_narrows(self, directory):
        filters = CoachFilters(divisions=FacetFilter(values=["NCAA Division II"]))
        scope = resolve_university_scope(directory, filters)
        assert scope.included == {"u-3"}

    def test_division_negation_only_excludes(self, directory):
        filters = CoachFilters(
            divisions=FacetFilter(values=["NCAA Division I"], operator=FilterOperator.IS_NOT)
        )
        scope = resolve_university_scope(directory, filters)
        assert scope.included is None
        assert scope.excluded == {"u-1"}

    def test_negated_universities_union_with_negated_divisions(self, directory):
        filters = CoachFilters(
            universities=FacetFilter(values=["u-4"], operator=FilterOperator.IS_NONE_OF),
            divisions=FacetFilter(values=["NCAA Division III"], operator=FilterOperator.IS_NONE_OF),
        )
        scope = resolve_university_scope(directory, filters)
        assert scope.excluded == {"u-2", "u-4"}

    def test_inclusion_facets_intersect(self, directory):
        filters = CoachFilters(
            universities=FacetFilter(values=["u-1", "u-3"]),
            divisions=FacetFilter(values=["NCAA Division II", "NCAA Division III"]),
        )
        scope = resolve_university_scope(directory, filters)
        assert scope.included == {"u-3"}

    def test_unknown_division_short_circuits(self, directory):
        """No tuition query runs once a facet resolves to nothing."""
        filters = CoachFilters(
            divisions=FacetFilter(values=["Club"]),
            tuition=NumericFilter(values=[0], operator=FilterOperator.IS_GREATER_THAN),
        )

        scope = resolve_university_scope(directory, filters)

        assert scope.is_empty
        assert "university_ids_by_cost" not in directory.calls

    def test_tuition_is_scoped_to_selected_universities(self, directory):
        filters = CoachFilters(
            universities=FacetFilter(values=["u-2"]),
            tuition=NumericFilter(values=[40000], operator=FilterOperator.IS_LESS_THAN),
        )
        scope = resolve_university_scope(directory, filters)
        assert scope.included == {"u-2"}

    def test_not_between_unions_both_sides(self, directory):
        filters = CoachFilters(
            tuition=NumericFilter(
                values=[25000, 40000], operator=FilterOperator.IS_NOT_BETWEEN
            ),
        )

        scope = resolve_university_scope(directory, filters)

        assert scope.included == {"u-1", "u-3"}
        assert directory.calls.count("university_ids_by_cost") == 2

    def test_tuition_never_matches_unknown_cost(self, directory):
        filters = CoachFilters(
            tuition=NumericFilter(values=[0], operator=FilterOperator.IS_NOT)
        )
        scope = resolve_university_scope(directory, filters)
        assert "u-4" not in scope.included

    def test_tuition_matching_nothing_is_empty(self, directory):
        filters = CoachFilters(
            tuition=NumericFilter(values=[1_000_000], operator=FilterOperator.IS_GREATER_THAN)
        )
        assert resolve_university_scope(directory, filters).is_empty

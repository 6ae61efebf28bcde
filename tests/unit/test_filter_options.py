"""
Unit tests for filter option counts.
"""

from recruitdesk.core.coaches.filter_options import FilterOptionsAggregator
from recruitdesk.core.coaches.filters import FacetSelection


def as_counts(options):
    return {option.name: option.count for option in options}


class TestFilterOptions:

    def test_unconditioned_counts(self, directory):
        options = FilterOptionsAggregator(directory).collect(FacetSelection())

        assert as_counts(options.divisions) == {
            "NAIA": 1,
            "NCAA Division I": 2,
            "NCAA Division II": 1,
            "NCAA Division III": 2,
        }
        assert as_counts(options.universities) == {
            "Alpha University": 2,
            "Beta College": 2,
            "Delta Tech": 1,
            "Gamma State": 1,
        }
        assert as_counts(options.programs)["Beta College Women"] == 2

    def test_options_are_sorted_by_name(self, directory):
        options = FilterOptionsAggregator(directory).collect(FacetSelection())

        names = [option.name for option in options.universities]
        assert names == sorted(names, key=str.lower)

    def test_facet_is_not_conditioned_on_itself(self, directory):
        """Choosing a division narrows the other lists, not the division list."""
        selection = FacetSelection(divisions=["NCAA Division I"])

        options = FilterOptionsAggregator(directory).collect(selection)

        assert len(options.divisions) == 4
        assert as_counts(options.universities) == {"Alpha University": 2}
        assert {option.id for option in options.programs} == {"p-1", "p-2"}

    def test_program_options_carry_university(self, directory):
        options = FilterOptionsAggregator(directory).collect(
            FacetSelection(universities=["u-3"])
        )

        assert len(options.programs) == 1
        program = options.programs[0]
        assert program.id == "p-4"
        assert program.name == "Gamma State Men"
        assert program.university_id == "u-3"

    def test_failed_facet_comes_back_empty(self, make_directory):
        directory = make_directory(fail_on={"university_counts"})

        options = FilterOptionsAggregator(directory).collect(FacetSelection())

        assert options.universities == []
        assert len(options.divisions) == 4
        assert len(options.programs) == 5

"""
Shared fixtures: a small coach directory with known shape.

    u-1 Alpha University    NCAA Division I            cost 50000
    u-2 Beta College        NCAA Division III          cost 30000
    u-3 Gamma State         NCAA Division II + NAIA    cost 20000
    u-4 Delta Tech          (no division)              cost unknown

Live jobs (not deleted, with a coach), ordered by id:

    j01 c-1 u-1 p-1      j04 c-4 u-3 p-4
    j02 c-2 u-1 p-2      j05 c-5 u-4 p-5
    j03 c-3 u-2 p-3      j06 c-1 u-2 p-3   (c-1 holds two jobs)

j07 has no coach and j08 is deleted; neither is ever returned or counted.
"""

import pytest

from recruitdesk.core.coaches.models import (
    Coach,
    Conference,
    Program,
    University,
    UniversityJob,
)
from recruitdesk.infrastructure.memory import (
    InMemoryCoachDirectory,
    InMemoryLeadListStore,
    InMemoryTeamDirectory,
)
from recruitdesk.infrastructure.storage.client import MockStorageClient


def build_directory(fail_on=None) -> InMemoryCoachDirectory:
    universities = [
        University(
            id="u-1", name="Alpha University", state="CA", city="Fresno",
            region="West", type_public_private="Public", total_yearly_cost=50000,
            average_gpa=3.8, sat_ebrw_25th=600, sat_ebrw_75th=700,
            sat_math_25th=610, sat_math_75th=720, act_composite_25th=27,
            act_composite_75th=32, acceptance_rate_pct=45,
            undergraduate_enrollment=21000, divisions=["NCAA Division I"],
            conferences=[Conference(id="conf-1", name="Mountain West")],
        ),
        University(
            id="u-2", name="Beta College", state="VT", city="Burlington",
            type_public_private="Private", religious_affiliation="None",
            total_yearly_cost=30000, divisions=["NCAA Division III"],
        ),
        University(
            id="u-3", name="Gamma State", state="TX", city="Austin, North",
            total_yearly_cost=20000, divisions=["NCAA Division II", "NAIA"],
            conferences=[
                Conference(id="conf-3", name="Lone Star"),
                Conference(id="conf-4", name="Red River"),
            ],
        ),
        University(id="u-4", name="Delta Tech", total_yearly_cost=None),
    ]
    programs = [
        Program(id="p-1", university_id="u-1", gender="Men"),
        Program(id="p-2", university_id="u-1", gender="Women"),
        Program(id="p-3", university_id="u-2", gender="Women"),
        Program(id="p-4", university_id="u-3", gender="Men"),
        Program(id="p-5", university_id="u-4", gender="Men"),
    ]
    coaches = [
        Coach(id="c-1", full_name="Jamie Lee Ortiz", email="jamie@example.com",
              phone="555-0001", twitter_profile="https://twitter.com/jlo"),
        Coach(id="c-2", full_name="Pat Kim", email="pat@example.com"),
        Coach(id="c-3", full_name="Morgan", phone="555-0003"),
        Coach(id="c-4", full_name="Alex Stone"),
        Coach(id="c-5", full_name="Riley Fox"),
        Coach(id="c-6", full_name="Casey Deleted"),
    ]
    jobs = [
        UniversityJob(id="j01", coach_id="c-1", university_id="u-1", program_id="p-1",
                      job_title="Head Coach", work_email="jortiz@alpha.example.edu"),
        UniversityJob(id="j02", coach_id="c-2", university_id="u-1", program_id="p-2",
                      job_title="Assistant Coach", work_phone="555-1002"),
        UniversityJob(id="j03", coach_id="c-3", university_id="u-2", program_id="p-3",
                      job_title="Head Coach"),
        UniversityJob(id="j04", coach_id="c-4", university_id="u-3", program_id="p-4",
                      job_title="Head Coach"),
        UniversityJob(id="j05", coach_id="c-5", university_id="u-4", program_id="p-5",
                      job_title="Volunteer Coach"),
        UniversityJob(id="j06", coach_id="c-1", university_id="u-2", program_id="p-3",
                      job_title="Recruiting Coordinator"),
        UniversityJob(id="j07", coach_id=None, university_id="u-1", program_id="p-1"),
        UniversityJob(id="j08", coach_id="c-6", university_id="u-3", program_id="p-4",
                      is_deleted=True),
    ]
    return InMemoryCoachDirectory(universities, programs, coaches, jobs, fail_on=fail_on)


@pytest.fixture
def directory() -> InMemoryCoachDirectory:
    return build_directory()


@pytest.fixture
def storage() -> MockStorageClient:
    return MockStorageClient()


@pytest.fixture
def lead_lists() -> InMemoryLeadListStore:
    return InMemoryLeadListStore()


@pytest.fixture
def team() -> InMemoryTeamDirectory:
    return InMemoryTeamDirectory(members={"user-1": "member-1"})


@pytest.fixture
def make_directory():
    """Factory for directories with injected query failures."""
    return build_directory

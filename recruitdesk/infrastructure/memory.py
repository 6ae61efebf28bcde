"""
In-memory stand-ins for the Snowflake repositories.

Used in mock mode (no database credentials) and by the unit tests. They
follow the same contracts as the SQL repositories, including the row
multiplicity of the count queries: a job at a university holding two
divisions counts once under each division.

Any method can be made to fail by listing its name in `fail_on`; it then
raises QueryError like a broken query would.
"""

import logging
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from ..core.campaigns.models import (
    Campaign,
    CampaignLeadNotFoundError,
    CampaignNotFoundError,
    LeadList,
    NewCampaign,
    validate_campaign_changes,
)
from ..core.coaches.directory import CostCondition, JobQuery, QueryError
from ..core.coaches.filters import FacetSelection
from ..core.coaches.models import (
    Coach,
    Conference,
    Program,
    University,
    UniversityJob,
)

logger = logging.getLogger(__name__)


class _FailureInjection:
    fail_on: set[str]

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise QueryError(f"{operation} failed")


class InMemoryCoachDirectory(_FailureInjection):

    def __init__(
        self,
        universities: Optional[list[University]] = None,
        programs: Optional[list[Program]] = None,
        coaches: Optional[list[Coach]] = None,
        jobs: Optional[list[UniversityJob]] = None,
        fail_on: Optional[set[str]] = None,
    ) -> None:
        self.universities = {u.id: u for u in universities or []}
        self.programs = {p.id: p for p in programs or []}
        self.coaches = {c.id: c for c in coaches or []}
        self.jobs = list(jobs or [])
        self.fail_on = set(fail_on or ())
        self.calls: list[str] = []

    def university_ids_for_divisions(self, division_names: list[str]) -> set[str]:
        self._record("university_ids_for_divisions")
        wanted = set(division_names)
        return {
            u.id for u in self.universities.values()
            if wanted.intersection(u.divisions)
        }

    def university_ids_by_cost(
        self,
        condition: CostCondition,
        scope: Optional[set[str]] = None,
    ) -> set[str]:
        self._record("university_ids_by_cost")
        return {
            u.id for u in self.universities.values()
            if (scope is None or u.id in scope) and condition.matches(u.total_yearly_cost)
        }

    def count_jobs(self, query: JobQuery) -> int:
        self._record("count_jobs")
        return sum(1 for job in self.jobs if query.matches(job))

    def fetch_jobs(self, query: JobQuery, offset: int, limit: int) -> list[UniversityJob]:
        self._record("fetch_jobs")
        matching = sorted(
            (job for job in self.jobs if query.matches(job)),
            key=lambda job: job.id,
        )
        return [self._resolve(job) for job in matching[offset:offset + limit]]

    def division_counts(self, selection: FacetSelection) -> list[tuple[str, int]]:
        self._record("division_counts")
        counts: Counter = Counter()
        for job in self._selected_jobs(selection):
            university = self.universities.get(job.university_id)
            if university is not None:
                counts.update(university.divisions)
        return list(counts.items())

    def university_counts(self, selection: FacetSelection) -> list[tuple[str, str, int]]:
        self._record("university_counts")
        counts = Counter(
            job.university_id for job in self._selected_jobs(selection)
            if job.university_id in self.universities
        )
        return [
            (university_id, self.universities[university_id].name, count)
            for university_id, count in counts.items()
        ]

    def program_counts(self, selection: FacetSelection) -> list[tuple[str, str, str, int]]:
        self._record("program_counts")
        counts = Counter(
            job.program_id for job in self._selected_jobs(selection)
            if job.program_id in self.programs
        )
        return [
            (
                program_id,
                self._program(program_id).display_name,
                self.programs[program_id].university_id,
                count,
            )
            for program_id, count in counts.items()
        ]

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        self._check(operation)

    def _selected_jobs(self, selection: FacetSelection) -> list[UniversityJob]:
        divisions = set(selection.divisions)
        selected = []
        for job in self.jobs:
            if job.is_deleted or job.coach_id is None:
                continue
            if selection.universities and job.university_id not in selection.universities:
                continue
            if selection.programs and job.program_id not in selection.programs:
                continue
            if divisions:
                university = self.universities.get(job.university_id)
                if university is None or not divisions.intersection(university.divisions):
                    continue
            selected.append(job)
        return selected

    def _program(self, program_id: Optional[str]) -> Optional[Program]:
        program = self.programs.get(program_id)
        if program is None:
            return None
        university = self.universities.get(program.university_id)
        return replace(program, university_name=university.name if university else None)

    def _resolve(self, job: UniversityJob) -> UniversityJob:
        return replace(
            job,
            coach=self.coaches.get(job.coach_id),
            university=self.universities.get(job.university_id),
            program=self._program(job.program_id),
        )


class InMemoryCampaignStore:

    def __init__(
        self,
        campaigns: Optional[list[Campaign]] = None,
        lead_ids: Optional[list[str]] = None,
    ) -> None:
        self.campaigns = {c.id: c for c in campaigns or []}
        # campaign lead id -> is_deleted
        self.leads = {lead_id: False for lead_id in lead_ids or []}

    def create(self, new: NewCampaign) -> Campaign:
        campaign = Campaign.from_new(new)
        self.campaigns[campaign.id] = campaign
        return campaign

    def get(self, campaign_id: str) -> Campaign:
        campaign = self.campaigns.get(campaign_id)
        if campaign is None or campaign.is_deleted:
            raise CampaignNotFoundError(f"Campaign {campaign_id} not found")
        return campaign

    def search(
        self,
        search_term: str = "",
        page: int = 0,
        page_size: int = 50,
        athlete_id: Optional[str] = None,
    ) -> tuple[list[Campaign], bool]:
        term = search_term.lower()
        matching = sorted(
            (
                c for c in self.campaigns.values()
                if not c.is_deleted
                and term in c.name.lower()
                and (athlete_id is None or c.athlete_id == athlete_id)
            ),
            key=lambda c: c.name,
        )
        start = page * page_size
        return matching[start:start + page_size], len(matching) > start + page_size

    def update(self, campaign_id: str, changes: dict) -> Campaign:
        cleaned = validate_campaign_changes(changes)
        campaign = replace(self.get(campaign_id), **cleaned)
        self.campaigns[campaign_id] = campaign
        return campaign

    def soft_delete(self, campaign_id: str) -> None:
        campaign = self.get(campaign_id)
        self.campaigns[campaign_id] = replace(
            campaign, is_deleted=True, deleted_at=datetime.now(timezone.utc)
        )

    def soft_delete_lead(self, lead_id: str) -> None:
        if lead_id not in self.leads:
            raise CampaignLeadNotFoundError("Campaign lead not found")
        self.leads[lead_id] = True


class InMemoryLeadListStore(_FailureInjection):

    def __init__(self, fail_on: Optional[set[str]] = None) -> None:
        self.lead_lists: dict[str, LeadList] = {}
        self.fail_on = set(fail_on or ())

    def create(self, lead_list: LeadList) -> LeadList:
        self._check("create")
        self.lead_lists[lead_list.id] = lead_list
        return lead_list

    def list_for_campaign(self, campaign_id: str) -> list[LeadList]:
        self._check("list_for_campaign")
        return sorted(
            (ll for ll in self.lead_lists.values() if ll.campaign_id == campaign_id),
            key=lambda ll: ll.generated_at,
            reverse=True,
        )

    def delete(self, list_id: str) -> None:
        self._check("delete")
        self.lead_lists.pop(list_id, None)


class InMemoryTeamDirectory(_FailureInjection):
    """
    Maps user ids to team member ids.

    With `default_member_id` set, every user resolves to that member
    (mock mode, where there is no team table).
    """

    def __init__(
        self,
        members: Optional[dict[str, str]] = None,
        default_member_id: Optional[str] = None,
        fail_on: Optional[set[str]] = None,
    ) -> None:
        self.members = dict(members or {})
        self.default_member_id = default_member_id
        self.fail_on = set(fail_on or ())

    def find_team_member_id(self, user_id: str) -> Optional[str]:
        self._check("find_team_member_id")
        return self.members.get(user_id, self.default_member_id)


# ---------------------------------------------------------------------------
# Demo Data for Mock Mode
# ---------------------------------------------------------------------------

def demo_directory() -> InMemoryCoachDirectory:
    """A small directory so mock mode returns something to look at."""
    universities = [
        University(
            id="u-1", name="Lakeside State University", state="MN", city="Duluth",
            region="Midwest", type_public_private="Public", total_yearly_cost=24000,
            average_gpa=3.4, sat_ebrw_25th=520, sat_ebrw_75th=620,
            sat_math_25th=510, sat_math_75th=630, acceptance_rate_pct=72,
            undergraduate_enrollment=9800, divisions=["NCAA Division II"],
            conferences=[Conference(id="conf-1", name="Northern Sun")],
        ),
        University(
            id="u-2", name="Harbor College", state="ME", city="Portland",
            region="Northeast", type_public_private="Private", total_yearly_cost=61000,
            average_gpa=3.7, act_composite_25th=26, act_composite_75th=31,
            acceptance_rate_pct=38, undergraduate_enrollment=2100,
            divisions=["NCAA Division III"],
            conferences=[Conference(id="conf-2", name="Coastal Athletic")],
        ),
        University(
            id="u-3", name="Prairie Community College", state="KS", city="Salina",
            region="Midwest", type_public_private="Public", total_yearly_cost=9000,
            divisions=["NJCAA Junior College"],
        ),
    ]
    programs = [
        Program(id="p-1", university_id="u-1", gender="Men"),
        Program(id="p-2", university_id="u-1", gender="Women"),
        Program(id="p-3", university_id="u-2", gender="Women"),
        Program(id="p-4", university_id="u-3", gender="Men"),
    ]
    coaches = [
        Coach(id="c-1", full_name="Dana Reyes", email="dana@example.com"),
        Coach(id="c-2", full_name="Sam Okafor", phone="555-0102",
              twitter_profile="https://twitter.com/samokafor"),
        Coach(id="c-3", full_name="Lee Park", email="lee@example.com"),
        Coach(id="c-4", full_name="Jordan Miles"),
    ]
    jobs = [
        UniversityJob(id="j-1", coach_id="c-1", university_id="u-1", program_id="p-1",
                      job_title="Head Coach", work_email="dreyes@lakeside.example.edu"),
        UniversityJob(id="j-2", coach_id="c-2", university_id="u-1", program_id="p-2",
                      job_title="Assistant Coach"),
        UniversityJob(id="j-3", coach_id="c-3", university_id="u-2", program_id="p-3",
                      job_title="Head Coach", work_phone="555-0199"),
        UniversityJob(id="j-4", coach_id="c-4", university_id="u-3", program_id="p-4",
                      job_title="Head Coach"),
    ]
    return InMemoryCoachDirectory(universities, programs, coaches, jobs)

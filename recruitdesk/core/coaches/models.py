"""
Domain models for coach export.

These records mirror the tables the export reads (universities, programs,
coaches, university_jobs) plus the flat record handed to the table view and
the CSV serializer. They carry no database or HTTP knowledge; repositories
build them from rows and the API layer serializes them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Table Records
# ---------------------------------------------------------------------------

@dataclass
class Conference:
    id: str
    name: str


@dataclass
class University:
    """
    A university as the export sees it.

    Divisions and conferences are many-to-many in the schema, so they are
    kept as ordered lists here. The flattener only ever surfaces the first
    entry of each.
    """
    id: str
    name: str
    state: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    size_of_city: Optional[str] = None
    type_public_private: Optional[str] = None
    religious_affiliation: Optional[str] = None
    total_yearly_cost: Optional[float] = None
    average_gpa: Optional[float] = None
    sat_ebrw_25th: Optional[int] = None
    sat_ebrw_75th: Optional[int] = None
    sat_math_25th: Optional[int] = None
    sat_math_75th: Optional[int] = None
    act_composite_25th: Optional[int] = None
    act_composite_75th: Optional[int] = None
    acceptance_rate_pct: Optional[float] = None
    undergraduate_enrollment: Optional[int] = None
    divisions: list[str] = field(default_factory=list)
    conferences: list[Conference] = field(default_factory=list)


@dataclass
class Program:
    """A sports program at a university, scoped by gender."""
    id: str
    university_id: str
    gender: Optional[str] = None
    university_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        """University name plus gender, e.g. "State University Men"."""
        return f"{self.university_name or ''} {self.gender or ''}".strip()


@dataclass
class Coach:
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    twitter_profile: Optional[str] = None
    instagram_profile: Optional[str] = None
    linkedin_profile: Optional[str] = None


@dataclass
class UniversityJob:
    """
    An employment record linking a coach to a university and program.

    The relation fields (coach, university, program) are filled in by the
    directory when the job is fetched for export; they stay None when the
    referenced row is missing.
    """
    id: str
    coach_id: Optional[str] = None
    university_id: Optional[str] = None
    program_id: Optional[str] = None
    job_title: Optional[str] = None
    work_email: Optional[str] = None
    work_phone: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_deleted: bool = False
    coach: Optional[Coach] = None
    university: Optional[University] = None
    program: Optional[Program] = None


# ---------------------------------------------------------------------------
# Export Records
# ---------------------------------------------------------------------------

@dataclass
class CampaignCoachData:
    """
    One coach in one job, flattened for the table view and CSV export.

    A coach holding several jobs produces several records. Nullable values
    pass through as None; consumers decide how to render them.
    """
    # Coach
    coach_id: str
    coach_name: str
    coach_email: Optional[str] = None
    coach_phone: Optional[str] = None
    coach_twitter: Optional[str] = None
    coach_instagram: Optional[str] = None
    coach_linkedin: Optional[str] = None

    # University job
    university_job_id: Optional[str] = None
    job_title: Optional[str] = None
    work_email: Optional[str] = None
    work_phone: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    # University
    university_id: Optional[str] = None
    university_name: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    size_of_city: Optional[str] = None
    public_private: Optional[str] = None
    religious_affiliation: Optional[str] = None
    tuition: Optional[float] = None
    conference_id: Optional[str] = None
    conference_name: Optional[str] = None

    # Academics
    average_gpa: Optional[float] = None
    sat_reading_25th: Optional[int] = None
    sat_reading_75th: Optional[int] = None
    sat_math_25th: Optional[int] = None
    sat_math_75th: Optional[int] = None
    act_composite_25th: Optional[int] = None
    act_composite_75th: Optional[int] = None
    acceptance_rate: Optional[float] = None
    undergraduate_enrollment: Optional[int] = None

    # Program
    program_id: Optional[str] = None
    program_name: Optional[str] = None
    division: Optional[str] = None
    gender: Optional[str] = None

    # Campaign lead (never populated for exports)
    campaign_lead_id: Optional[str] = None
    lead_status: Optional[str] = None
    include_reason: Optional[str] = None
    included_at: Optional[str] = None


@dataclass
class Pagination:
    page: int
    page_size: int
    total_count: int
    total_pages: int


@dataclass
class CoachPage:
    """A page of flattened coach records plus pagination info."""
    records: list[CampaignCoachData]
    pagination: Pagination


# ---------------------------------------------------------------------------
# Filter Option Records
# ---------------------------------------------------------------------------

@dataclass
class DivisionOption:
    name: str
    count: int


@dataclass
class UniversityOption:
    id: str
    name: str
    count: int


@dataclass
class ProgramOption:
    id: str
    name: str
    university_id: str
    count: int


@dataclass
class FilterOptions:
    divisions: list[DivisionOption] = field(default_factory=list)
    universities: list[UniversityOption] = field(default_factory=list)
    programs: list[ProgramOption] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Action Envelope
# ---------------------------------------------------------------------------

@dataclass
class ActionResult:
    """
    Result envelope returned by every coach export action.

    Callers check `success` and show the first human-readable message from
    `error`, `validation_errors` or `server_error`.
    """
    success: bool
    data: Optional[object] = None
    pagination: Optional[Pagination] = None
    error: Optional[str] = None
    validation_errors: Optional[list[str]] = None
    server_error: Optional[str] = None

    @classmethod
    def ok(cls, data: object, pagination: Optional[Pagination] = None) -> "ActionResult":
        return cls(success=True, data=data, pagination=pagination)

    @classmethod
    def failure(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)


class Facet(Enum):
    """The filterable dimensions of the coach export."""
    DIVISIONS = "divisions"
    UNIVERSITIES = "universities"
    PROGRAMS = "programs"
    TUITION = "tuition"

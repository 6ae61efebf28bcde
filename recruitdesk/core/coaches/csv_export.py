"""
CSV rendering for the sending tool's coach import.

The column set and order are fixed by the sending tool's import template.
Rows are comma-delimited and joined with "\\n" (no trailing newline).
"""

from decimal import Decimal
from typing import Optional, Sequence

from .models import CampaignCoachData

CSV_HEADERS = [
    "First name",
    "Last name",
    "Email address",
    "Phone number",
    "Position",
    "School",
    "State",
    "City",
    "Division",
    "Conference",
    "Region",
    "Size of city",
    "Private/Public",
    "Religious affiliation?",
    "Average GPA",
    "SAT-Reading (25th-75th percentile)",
    "SAT-Math (25th-75th percentile)",
    "ACT composite (25th-75th percentile)",
    "Acceptance rate",
    "Total yearly cost (in-state/out-of-state)",
    "No. of undergrads",
    "Individual's Twitter",
    "Individual's Instagram",
]


def escape_csv(value: str) -> str:
    """Quote a field containing a comma, quote or newline, doubling inner quotes."""
    if "," in value or '"' in value or "\n" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def map_division_to_code(division: Optional[str]) -> str:
    """
    Short division code used by the sending tool.

    Matching is case-insensitive on substrings, longest numeral first so
    "Division III" is not read as "Division I". Unknown names pass through.
    """
    if not division:
        return ""
    lower = division.lower()
    if "division iii" in lower:
        return "DIII"
    if "division ii" in lower:
        return "DII"
    if "division i" in lower:
        return "DI"
    if "naia" in lower:
        return "NAIA"
    if "juco" in lower or "junior college" in lower:
        return "JuCo"
    return division


def format_number(value) -> str:
    """Render a number without a trailing ".0"; zero and None render empty."""
    if not value:
        return ""
    if isinstance(value, Decimal):
        value = value.normalize()
        return format(value, "f")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_percentile_range(low, high) -> str:
    """Format as low-high, a single bound when only one is known, or empty."""
    if low and high:
        return f"{format_number(low)}-{format_number(high)}"
    if low:
        return format_number(low)
    if high:
        return format_number(high)
    return ""


def split_name(full_name: Optional[str]) -> tuple[str, str]:
    """Split at the first space: ("Jamie", "Lee Ortiz")."""
    first, _, last = (full_name or "").strip().partition(" ")
    return first, last


def coach_to_row(coach: CampaignCoachData) -> list[str]:
    first_name, last_name = split_name(coach.coach_name)
    acceptance_rate = (
        f"{format_number(coach.acceptance_rate)}%" if coach.acceptance_rate else ""
    )

    return [
        escape_csv(first_name),
        escape_csv(last_name),
        escape_csv(coach.work_email or coach.coach_email or ""),
        escape_csv(coach.work_phone or coach.coach_phone or ""),
        escape_csv(coach.job_title or ""),
        escape_csv(coach.university_name or ""),
        escape_csv(coach.state or ""),
        escape_csv(coach.city or ""),
        escape_csv(map_division_to_code(coach.division)),
        escape_csv(coach.conference_name or ""),
        escape_csv(coach.region or ""),
        escape_csv(coach.size_of_city or ""),
        escape_csv(coach.public_private or ""),
        escape_csv(coach.religious_affiliation or ""),
        format_number(coach.average_gpa),
        escape_csv(format_percentile_range(coach.sat_reading_25th, coach.sat_reading_75th)),
        escape_csv(format_percentile_range(coach.sat_math_25th, coach.sat_math_75th)),
        escape_csv(format_percentile_range(coach.act_composite_25th, coach.act_composite_75th)),
        escape_csv(acceptance_rate),
        format_number(coach.tuition),
        format_number(coach.undergraduate_enrollment),
        escape_csv(coach.coach_twitter or ""),
        escape_csv(coach.coach_instagram or ""),
    ]


def generate_csv(coaches: Sequence[CampaignCoachData]) -> str:
    """Render coaches as CSV text: one header line, then one line per record."""
    lines = [",".join(CSV_HEADERS)]
    lines.extend(",".join(coach_to_row(coach)) for coach in coaches)
    return "\n".join(lines)

"""
Snowflake repository for the coach export directory.

Implements `CoachDirectory` with plain SQL over the recruiting schema:
university_jobs, coaches, universities, programs, divisions,
university_divisions, conferences and university_conferences.

The count query and the page query are built from one WHERE clause
(`_job_where`), so they always filter the same rows.
"""

import logging
from typing import Optional, Sequence

from ....core.coaches.directory import CostCondition, JobQuery, QueryError
from ....core.coaches.filters import FacetSelection
from ....core.coaches.models import (
    Coach,
    Conference,
    Program,
    University,
    UniversityJob,
)
from ..client import SnowflakeConnection

logger = logging.getLogger(__name__)


_JOB_COLUMNS = (
    "j.id", "j.job_title", "j.work_email", "j.work_phone", "j.start_date",
    "j.end_date", "j.coach_id", "j.university_id", "j.program_id",
    "c.id", "c.full_name", "c.email", "c.phone", "c.twitter_profile",
    "c.instagram_profile", "c.linkedin_profile",
    "u.id", "u.name", "u.state", "u.city", "u.region", "u.size_of_city",
    "u.type_public_private", "u.religious_affiliation", "u.total_yearly_cost",
    "u.average_gpa", "u.sat_ebrw_25th", "u.sat_ebrw_75th", "u.sat_math_25th",
    "u.sat_math_75th", "u.act_composite_25th", "u.act_composite_75th",
    "u.acceptance_rate_pct", "u.undergraduate_enrollment",
    "p.id", "p.gender", "p.university_id", "pu.name",
)

_LIVE_JOB_CLAUSES = ("j.is_deleted = FALSE", "j.coach_id IS NOT NULL")

# Comparators are whitelisted by CostCondition; map them to SQL operators.
_COST_SQL = {
    "=": "=",
    "<>": "<>",
    "<": "<",
    "<=": "<=",
    ">": ">",
    ">=": ">=",
}


def _placeholders(count: int) -> str:
    return ", ".join(["%s"] * count)


def _in_clause(column: str, values: Sequence[str], negate: bool = False) -> tuple[str, list]:
    """`column IN (...)`, or an always-false/always-true clause for no values."""
    if not values:
        return ("1 = 1", []) if negate else ("1 = 0", [])
    keyword = "NOT IN" if negate else "IN"
    return f"{column} {keyword} ({_placeholders(len(values))})", list(values)


def _job_where(query: JobQuery) -> tuple[str, list]:
    """WHERE clause shared by the job count and job page queries."""
    clauses = list(_LIVE_JOB_CLAUSES)
    params: list = []

    def add(clause: tuple[str, list]) -> None:
        clauses.append(clause[0])
        params.extend(clause[1])

    if query.university_ids is not None:
        add(_in_clause("j.university_id", sorted(query.university_ids)))
    if query.excluded_university_ids:
        add(_in_clause("j.university_id", sorted(query.excluded_university_ids), negate=True))
    if query.program_ids is not None:
        add(_in_clause("j.program_id", sorted(query.program_ids)))
    if query.excluded_program_ids:
        add(_in_clause("j.program_id", sorted(query.excluded_program_ids), negate=True))

    return " AND ".join(clauses), params


def _selection_where(selection: FacetSelection) -> tuple[str, list]:
    """WHERE clause for the option count queries."""
    clauses = list(_LIVE_JOB_CLAUSES)
    params: list = []

    if selection.universities:
        sql, values = _in_clause("j.university_id", selection.universities)
        clauses.append(sql)
        params.extend(values)
    if selection.programs:
        sql, values = _in_clause("j.program_id", selection.programs)
        clauses.append(sql)
        params.extend(values)
    if selection.divisions:
        clauses.append(f"""j.university_id IN (
                SELECT ud.university_id
                FROM university_divisions ud
                JOIN divisions d ON d.id = ud.division_id
                WHERE d.name IN ({_placeholders(len(selection.divisions))})
            )""")
        params.extend(selection.divisions)

    return " AND ".join(clauses), params


class SnowflakeCoachDirectory:
    """
    Read-only repository behind the coach export.

    Every public method runs its own cursor and raises QueryError on any
    database failure, after logging it.
    """

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    # -----------------------------------------------------------------------
    # University resolution
    # -----------------------------------------------------------------------

    def university_ids_for_divisions(self, division_names: list[str]) -> set[str]:
        if not division_names:
            return set()

        rows = self._fetch(f"""
            SELECT DISTINCT ud.university_id
            FROM divisions d
            JOIN university_divisions ud ON ud.division_id = d.id
            WHERE d.name IN ({_placeholders(len(division_names))})
        """, list(division_names))

        return {str(row[0]) for row in rows}

    def university_ids_by_cost(
        self,
        condition: CostCondition,
        scope: Optional[set[str]] = None,
    ) -> set[str]:
        if condition.comparator == "between":
            cost_clause = "total_yearly_cost BETWEEN %s AND %s"
            params: list = [condition.value, condition.upper]
        else:
            cost_clause = f"total_yearly_cost {_COST_SQL[condition.comparator]} %s"
            params = [condition.value]

        scope_clause = ""
        if scope is not None:
            sql, values = _in_clause("id", sorted(scope))
            scope_clause = f"AND {sql}"
            params.extend(values)

        rows = self._fetch(f"""
            SELECT id
            FROM universities
            WHERE total_yearly_cost IS NOT NULL
              AND {cost_clause}
              {scope_clause}
        """, params)

        return {str(row[0]) for row in rows}

    # -----------------------------------------------------------------------
    # Jobs
    # -----------------------------------------------------------------------

    def count_jobs(self, query: JobQuery) -> int:
        where, params = _job_where(query)
        rows = self._fetch(f"""
            SELECT COUNT(*)
            FROM university_jobs j
            WHERE {where}
        """, params)
        return int(rows[0][0]) if rows else 0

    def fetch_jobs(self, query: JobQuery, offset: int, limit: int) -> list[UniversityJob]:
        where, params = _job_where(query)
        rows = self._fetch(f"""
            SELECT {", ".join(_JOB_COLUMNS)}
            FROM university_jobs j
            LEFT JOIN coaches c ON c.id = j.coach_id
            LEFT JOIN universities u ON u.id = j.university_id
            LEFT JOIN programs p ON p.id = j.program_id
            LEFT JOIN universities pu ON pu.id = p.university_id
            WHERE {where}
            ORDER BY j.id ASC
            LIMIT %s OFFSET %s
        """, params + [limit, offset])

        jobs = [self._build_job(dict(zip(_JOB_COLUMNS, row))) for row in rows]

        university_ids = sorted({
            job.university.id for job in jobs if job.university is not None
        })
        if university_ids:
            divisions = self._divisions_for(university_ids)
            conferences = self._conferences_for(university_ids)
            for job in jobs:
                if job.university is not None:
                    job.university.divisions = divisions.get(job.university.id, [])
                    job.university.conferences = conferences.get(job.university.id, [])

        return jobs

    # -----------------------------------------------------------------------
    # Filter option counts
    # -----------------------------------------------------------------------

    def division_counts(self, selection: FacetSelection) -> list[tuple[str, int]]:
        where, params = _selection_where(selection)
        rows = self._fetch(f"""
            SELECT d.name, COUNT(*) AS coach_count
            FROM university_jobs j
            JOIN university_divisions ud ON ud.university_id = j.university_id
            JOIN divisions d ON d.id = ud.division_id
            WHERE {where}
            GROUP BY d.name
        """, params)
        return [(row[0], int(row[1])) for row in rows if row[0]]

    def university_counts(self, selection: FacetSelection) -> list[tuple[str, str, int]]:
        where, params = _selection_where(selection)
        rows = self._fetch(f"""
            SELECT u.id, u.name, COUNT(*) AS coach_count
            FROM university_jobs j
            JOIN universities u ON u.id = j.university_id
            WHERE {where}
            GROUP BY u.id, u.name
        """, params)
        return [(str(row[0]), row[1], int(row[2])) for row in rows if row[1]]

    def program_counts(self, selection: FacetSelection) -> list[tuple[str, str, str, int]]:
        where, params = _selection_where(selection)
        rows = self._fetch(f"""
            SELECT p.id, pu.name, p.gender, p.university_id, COUNT(*) AS coach_count
            FROM university_jobs j
            JOIN programs p ON p.id = j.program_id
            JOIN universities pu ON pu.id = p.university_id
            WHERE {where}
            GROUP BY p.id, pu.name, p.gender, p.university_id
        """, params)
        return [
            (
                str(row[0]),
                Program(id=str(row[0]), university_id=str(row[3]), gender=row[2],
                        university_name=row[1]).display_name,
                str(row[3]),
                int(row[4]),
            )
            for row in rows
        ]

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    def _fetch(self, sql: str, params: list) -> list:
        cursor = self._conn.cursor()
        try:
            cursor.execute(sql, tuple(params))
            return cursor.fetchall()
        except Exception as e:
            logger.error(
                "Coach directory query failed",
                extra={"query": " ".join(sql.split())[:120], "error": str(e)}
            )
            raise QueryError(str(e)) from e
        finally:
            cursor.close()

    def _divisions_for(self, university_ids: list[str]) -> dict[str, list[str]]:
        rows = self._fetch(f"""
            SELECT ud.university_id, d.name
            FROM university_divisions ud
            JOIN divisions d ON d.id = ud.division_id
            WHERE ud.university_id IN ({_placeholders(len(university_ids))})
            ORDER BY ud.university_id, d.name
        """, university_ids)

        divisions: dict[str, list[str]] = {}
        for university_id, name in rows:
            divisions.setdefault(str(university_id), []).append(name)
        return divisions

    def _conferences_for(self, university_ids: list[str]) -> dict[str, list[Conference]]:
        rows = self._fetch(f"""
            SELECT uc.university_id, c.id, c.name
            FROM university_conferences uc
            JOIN conferences c ON c.id = uc.conference_id
            WHERE uc.university_id IN ({_placeholders(len(university_ids))})
            ORDER BY uc.university_id, c.name
        """, university_ids)

        conferences: dict[str, list[Conference]] = {}
        for university_id, conference_id, name in rows:
            conferences.setdefault(str(university_id), []).append(
                Conference(id=str(conference_id), name=name)
            )
        return conferences

    def _build_job(self, row: dict) -> UniversityJob:
        coach = None
        if row["c.id"] is not None:
            coach = Coach(
                id=str(row["c.id"]),
                full_name=row["c.full_name"],
                email=row["c.email"],
                phone=row["c.phone"],
                twitter_profile=row["c.twitter_profile"],
                instagram_profile=row["c.instagram_profile"],
                linkedin_profile=row["c.linkedin_profile"],
            )

        university = None
        if row["u.id"] is not None:
            university = University(
                id=str(row["u.id"]),
                name=row["u.name"],
                state=row["u.state"],
                city=row["u.city"],
                region=row["u.region"],
                size_of_city=row["u.size_of_city"],
                type_public_private=row["u.type_public_private"],
                religious_affiliation=row["u.religious_affiliation"],
                total_yearly_cost=row["u.total_yearly_cost"],
                average_gpa=row["u.average_gpa"],
                sat_ebrw_25th=row["u.sat_ebrw_25th"],
                sat_ebrw_75th=row["u.sat_ebrw_75th"],
                sat_math_25th=row["u.sat_math_25th"],
                sat_math_75th=row["u.sat_math_75th"],
                act_composite_25th=row["u.act_composite_25th"],
                act_composite_75th=row["u.act_composite_75th"],
                acceptance_rate_pct=row["u.acceptance_rate_pct"],
                undergraduate_enrollment=row["u.undergraduate_enrollment"],
            )

        program = None
        if row["p.id"] is not None:
            program = Program(
                id=str(row["p.id"]),
                university_id=str(row["p.university_id"]),
                gender=row["p.gender"],
                university_name=row["pu.name"],
            )

        return UniversityJob(
            id=str(row["j.id"]),
            coach_id=str(row["j.coach_id"]) if row["j.coach_id"] is not None else None,
            university_id=str(row["j.university_id"]) if row["j.university_id"] is not None else None,
            program_id=str(row["j.program_id"]) if row["j.program_id"] is not None else None,
            job_title=row["j.job_title"],
            work_email=row["j.work_email"],
            work_phone=row["j.work_phone"],
            start_date=_iso(row["j.start_date"]),
            end_date=_iso(row["j.end_date"]),
            coach=coach,
            university=university,
            program=program,
        )


def _iso(value) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)

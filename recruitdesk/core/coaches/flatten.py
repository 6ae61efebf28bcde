"""
Flatten joined job rows into export records.

Only the first division and first conference of a university are surfaced.
The schema allows several, but the sending tool has one column for each.
"""

from typing import Iterable, Optional

from .models import CampaignCoachData, UniversityJob


def flatten_job(job: UniversityJob) -> Optional[CampaignCoachData]:
    """Map one job to a flat record, or None when the job has no coach."""
    coach = job.coach
    if coach is None:
        return None

    university = job.university
    program = job.program

    division = None
    conference = None
    if university is not None:
        division = university.divisions[0] if university.divisions else None
        conference = university.conferences[0] if university.conferences else None

    program_name = None
    if program is not None and program.university_name:
        program_name = program.university_name.strip()

    return CampaignCoachData(
        coach_id=coach.id,
        coach_name=coach.full_name or "",
        coach_email=coach.email,
        coach_phone=coach.phone,
        coach_twitter=coach.twitter_profile,
        coach_instagram=coach.instagram_profile,
        coach_linkedin=coach.linkedin_profile,
        university_job_id=job.id,
        job_title=job.job_title,
        work_email=job.work_email,
        work_phone=job.work_phone,
        start_date=job.start_date,
        end_date=job.end_date,
        university_id=university.id if university else None,
        university_name=university.name if university else None,
        state=university.state if university else None,
        city=university.city if university else None,
        region=university.region if university else None,
        size_of_city=university.size_of_city if university else None,
        public_private=university.type_public_private if university else None,
        religious_affiliation=university.religious_affiliation if university else None,
        tuition=university.total_yearly_cost if university else None,
        conference_id=conference.id if conference else None,
        conference_name=conference.name if conference else None,
        average_gpa=university.average_gpa if university else None,
        sat_reading_25th=university.sat_ebrw_25th if university else None,
        sat_reading_75th=university.sat_ebrw_75th if university else None,
        sat_math_25th=university.sat_math_25th if university else None,
        sat_math_75th=university.sat_math_75th if university else None,
        act_composite_25th=university.act_composite_25th if university else None,
        act_composite_75th=university.act_composite_75th if university else None,
        acceptance_rate=university.acceptance_rate_pct if university else None,
        undergraduate_enrollment=university.undergraduate_enrollment if university else None,
        program_id=program.id if program else None,
        program_name=program_name,
        division=division,
        gender=program.gender if program else None,
    )


def flatten_jobs(jobs: Iterable[UniversityJob]) -> list[CampaignCoachData]:
    """Flatten jobs in order, dropping those without a coach."""
    records = []
    for job in jobs:
        record = flatten_job(job)
        if record is not None:
            records.append(record)
    return records

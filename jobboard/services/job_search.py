# job_search.py
import logging
from typing import Iterable, Tuple

from sqlalchemy.orm import Query, Session, joinedload

from jobboard.models.job import Job
from jobboard.models.user import User
from jobboard.schemas.job import JobListFilters, JobSearchFilters, split_csv
from jobboard.services.text_matching import (
    Normalizer,
    calculate_similarity,
    find_closest_matches,
    string_similarity,
)


logger = logging.getLogger(__name__)

SKILL_FILTER_THRESHOLD = 0.8
RECOMMENDATION_THRESHOLD = 0.3
RECOMMENDATION_LIMIT = 10


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, value: str):
    return column.ilike(f"%{_escape_like(value)}%", escape="\\")


def _base_query(db: Session) -> Query:
    return db.query(Job).options(joinedload(Job.creator)).order_by(Job.created_at.desc(), Job.id.desc())


def _lower_items(values: Iterable[str] | None) -> list[str]:
    return [str(value).lower() for value in (values or []) if value]


def _matches_any_tag(job: Job, wanted: list[str]) -> bool:
    job_tags = _lower_items(job.tags)
    return any(tag in job_tag for tag in wanted for job_tag in job_tags)


def _matches_any_skill(job: Job, wanted: list[str]) -> bool:
    job_skills = _lower_items(job.skills)
    return any(skill in job_skill for skill in wanted for job_skill in job_skills)


def job_search_text(job: Job) -> str:
    return " ".join(
        [
            job.title or "",
            job.description or "",
            " ".join(job.skills or []),
            " ".join(job.tags or []),
        ]
    ).lower()


def matches_query(job: Job, query: str, *, normalizer: Normalizer | None = None) -> bool:
    needle = query.lower()
    search_text = job_search_text(job)
    if needle in search_text:
        return True
    return bool(find_closest_matches(needle, search_text.split(), normalizer=normalizer))


def matches_required_skills(job: Job, required_skills: list[str]) -> bool:
    job_skills = _lower_items(job.skills)
    return all(
        any(string_similarity(skill, job_skill) > SKILL_FILTER_THRESHOLD for job_skill in job_skills)
        for skill in required_skills
    )


def fetch_jobs(db: Session, *, location: str | None = None) -> list[Job]:
    query = _base_query(db)
    if location:
        query = query.filter(_contains(Job.location, location))
    return query.all()


def search_jobs(db: Session, filters: JobSearchFilters, *, normalizer: Normalizer | None = None) -> list[Job]:
    """Structured filters first, then the free-text query and fuzzy skill filter.

    Results keep the newest-first order of the underlying job query.
    """

    jobs = fetch_jobs(db, location=(filters.location or "").strip() or None)

    wanted_tags = [tag.lower() for tag in split_csv(filters.tags)]
    if wanted_tags:
        jobs = [job for job in jobs if _matches_any_tag(job, wanted_tags)]

    query = (filters.q or "").strip()
    if query:
        jobs = [job for job in jobs if matches_query(job, query, normalizer=normalizer)]

    required_skills = [skill.lower() for skill in split_csv(filters.skills)]
    if required_skills:
        jobs = [job for job in jobs if matches_required_skills(job, required_skills)]

    logger.debug("job search q=%r skills=%r matched=%d", query, required_skills, len(jobs))
    return jobs


def list_jobs(db: Session, filters: JobListFilters) -> list[Job]:
    query = _base_query(db)
    if filters.location and filters.location.strip():
        query = query.filter(_contains(Job.location, filters.location.strip()))
    if filters.search and filters.search.strip():
        term = filters.search.strip()
        query = query.filter(_contains(Job.title, term) | _contains(Job.description, term))
    jobs = query.all()

    wanted_skills = [skill.lower() for skill in split_csv(filters.skills)]
    if wanted_skills:
        jobs = [job for job in jobs if _matches_any_skill(job, wanted_skills)]

    wanted_tags = [tag.lower() for tag in split_csv(filters.tags)]
    if wanted_tags:
        jobs = [job for job in jobs if _matches_any_tag(job, wanted_tags)]
    return jobs


def collect_job_skills(db: Session) -> list[str]:
    skills: list[str] = []
    seen: set[str] = set()
    for job in _base_query(db).all():
        for skill in _lower_items(job.skills):
            if skill not in seen:
                seen.add(skill)
                skills.append(skill)
    return skills


def user_profile_text(user: User) -> str:
    return " ".join([user.bio or "", " ".join(user.skills or [])])


def job_profile_text(job: Job) -> str:
    return " ".join([job.title or "", job.description or "", " ".join(job.skills or [])])


def recommend_jobs(
    db: Session,
    user_id: int,
    *,
    normalizer: Normalizer | None = None,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[Tuple[Job, float]]:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.info("recommendations requested for unknown user_id=%s", user_id)
        return []

    profile_text = user_profile_text(user)
    scored: list[Tuple[Job, float]] = []
    for job in _base_query(db).all():
        score = calculate_similarity(profile_text, job_profile_text(job), normalizer=normalizer)
        if score > RECOMMENDATION_THRESHOLD:
            scored.append((job, score))
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored[:limit]

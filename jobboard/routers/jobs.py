# jobs.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from jobboard.config import settings
from jobboard.database import get_db
from jobboard.models.job import Job
from jobboard.models.user import User
from jobboard.routers.dependencies import get_current_user, get_payment_verifier, get_skill_vocabulary
from jobboard.schemas.job import (
    JobCreate,
    JobListFilters,
    JobRead,
    JobRecommendation,
    JobSearchFilters,
    SkillSuggestionResponse,
)
from jobboard.services.job_search import collect_job_skills, list_jobs, recommend_jobs, search_jobs
from jobboard.services.payment import InvalidPaymentError, PaymentVerificationError, PaymentVerifier, check_payment
from jobboard.services.text_matching import SkillVocabulary, get_skill_suggestions


router = APIRouter(prefix="/jobs", tags=["jobs"])

logger = logging.getLogger(__name__)


@router.get("/skills", response_model=list[str])
def list_job_skills(db: Session = Depends(get_db)) -> list[str]:
    return collect_job_skills(db)


@router.get("/skills/suggest", response_model=SkillSuggestionResponse)
def suggest_skills(
    q: str = Query(default="", max_length=100),
    db: Session = Depends(get_db),
    vocabulary: SkillVocabulary = Depends(get_skill_vocabulary),
) -> SkillSuggestionResponse:
    # Skills already used by postings come first, then the vocabulary.
    pool = collect_job_skills(db)
    known = set(pool)
    pool.extend(skill for skill in vocabulary if skill.lower() not in known)
    return SkillSuggestionResponse(query=q, suggestions=get_skill_suggestions(q, pool))


@router.get("/search", response_model=list[JobRead])
def search_jobs_endpoint(
    q: Optional[str] = Query(default=None, max_length=200),
    skills: Optional[str] = Query(default=None, description="Comma-separated required skills"),
    location: Optional[str] = Query(default=None, max_length=255),
    tags: Optional[str] = Query(default=None, description="Comma-separated tags, any of which may match"),
    db: Session = Depends(get_db),
) -> list[JobRead]:
    filters = JobSearchFilters(q=q, skills=skills, location=location, tags=tags)
    return [JobRead.model_validate(job) for job in search_jobs(db, filters)]


@router.get("/recommendations/{user_id}", response_model=list[JobRecommendation])
def recommend_jobs_endpoint(user_id: int, db: Session = Depends(get_db)) -> list[JobRecommendation]:
    return [
        JobRecommendation(**JobRead.model_validate(job).model_dump(), similarity=score)
        for job, score in recommend_jobs(db, user_id)
    ]


@router.get("", response_model=list[JobRead])
def list_jobs_endpoint(
    skills: Optional[str] = Query(default=None),
    location: Optional[str] = Query(default=None, max_length=255),
    tags: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
) -> list[JobRead]:
    filters = JobListFilters(skills=skills, location=location, tags=tags, search=search)
    return [JobRead.model_validate(job) for job in list_jobs(db, filters)]


@router.get("/{job_id}", response_model=JobRead)
def read_job(job_id: int, db: Session = Depends(get_db)) -> JobRead:
    job = db.query(Job).options(joinedload(Job.creator)).filter(Job.id == job_id).first()
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return JobRead.model_validate(job)


@router.post("", response_model=JobRead, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    verifier: PaymentVerifier = Depends(get_payment_verifier),
) -> JobRead:
    tx_hash = payload.payment_tx_hash
    if db.query(Job.id).filter(Job.payment_tx_hash == tx_hash).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Transaction already used")

    try:
        verification = verifier.verify(tx_hash)
        check_payment(verification, admin_wallet=settings.admin_wallet, min_amount=settings.min_payment_eth)
    except PaymentVerificationError as exc:
        logger.warning("payment verification unavailable tx=%s: %s", tx_hash, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Payment verification unavailable") from exc
    except InvalidPaymentError as exc:
        logger.info("payment rejected tx=%s reason=%s", tx_hash, exc.reason)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.reason) from exc

    job = Job(
        title=payload.title,
        description=payload.description,
        skills=payload.skills,
        budget=payload.budget,
        salary=payload.salary,
        location=payload.location,
        tags=payload.tags,
        created_by=current_user.id,
        payment_tx_hash=tx_hash,
    )
    db.add(job)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Transaction already used") from exc
    db.refresh(job)
    logger.info("job created id=%s created_by=%s tx=%s", job.id, current_user.id, tx_hash)
    return JobRead.model_validate(job)

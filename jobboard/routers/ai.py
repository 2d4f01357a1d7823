# ai.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from jobboard.routers.dependencies import get_skill_vocabulary
from jobboard.schemas.skills import (
    ClosestMatchesRequest,
    ClosestMatchesResponse,
    ExtractSkillsRequest,
    ExtractSkillsResponse,
    ScoredMatch,
    SimilarityRequest,
    SimilarityResponse,
)
from jobboard.services.resume_parser import ResumeParseError, extract_text_from_pdf, is_pdf_upload
from jobboard.services.text_matching import (
    SkillVocabulary,
    calculate_similarity,
    extract_skills,
    score_closest_matches,
)


router = APIRouter(prefix="/ai", tags=["ai"])


def _skills_response(text: str | None, vocabulary: SkillVocabulary) -> ExtractSkillsResponse:
    return ExtractSkillsResponse(skills=sorted(extract_skills(text, vocabulary)))


@router.post("/extract-skills", response_model=ExtractSkillsResponse)
async def extract_skills_from_resume(
    resume: UploadFile | None = File(default=None),
    vocabulary: SkillVocabulary = Depends(get_skill_vocabulary),
) -> ExtractSkillsResponse:
    if resume is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if not is_pdf_upload(resume.filename, resume.content_type):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume must be a PDF")
    data = await resume.read()
    try:
        text = await run_in_threadpool(extract_text_from_pdf, data)
    except ResumeParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _skills_response(text, vocabulary)


@router.post("/extract-skills/text", response_model=ExtractSkillsResponse)
def extract_skills_from_text(
    payload: ExtractSkillsRequest,
    vocabulary: SkillVocabulary = Depends(get_skill_vocabulary),
) -> ExtractSkillsResponse:
    return _skills_response(payload.text, vocabulary)


@router.post("/similarity", response_model=SimilarityResponse)
def similarity(payload: SimilarityRequest) -> SimilarityResponse:
    return SimilarityResponse(similarity=calculate_similarity(payload.text_a, payload.text_b))


@router.post("/closest-matches", response_model=ClosestMatchesResponse)
def closest_matches(payload: ClosestMatchesRequest) -> ClosestMatchesResponse:
    scored = score_closest_matches(payload.query, payload.candidates)
    return ClosestMatchesResponse(
        matches=[match.candidate for match in scored],
        scored=[ScoredMatch(candidate=match.candidate, score=match.score) for match in scored],
    )

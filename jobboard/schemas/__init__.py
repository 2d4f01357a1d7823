# __init__.py
from jobboard.schemas.job import (
	JobCreate,
	JobCreator,
	JobListFilters,
	JobRead,
	JobRecommendation,
	JobSearchFilters,
	SkillSuggestionResponse,
)
from jobboard.schemas.skills import (
	ClosestMatchesRequest,
	ClosestMatchesResponse,
	ExtractSkillsRequest,
	ExtractSkillsResponse,
	ScoredMatch,
	SimilarityRequest,
	SimilarityResponse,
)
from jobboard.schemas.user import AuthResponse, Token, TokenData, UserCreate, UserLogin, UserRead, UserUpdate

__all__ = [
	"AuthResponse",
	"ClosestMatchesRequest",
	"ClosestMatchesResponse",
	"ExtractSkillsRequest",
	"ExtractSkillsResponse",
	"JobCreate",
	"JobCreator",
	"JobListFilters",
	"JobRead",
	"JobRecommendation",
	"JobSearchFilters",
	"ScoredMatch",
	"SimilarityRequest",
	"SimilarityResponse",
	"SkillSuggestionResponse",
	"Token",
	"TokenData",
	"UserCreate",
	"UserLogin",
	"UserRead",
	"UserUpdate",
]

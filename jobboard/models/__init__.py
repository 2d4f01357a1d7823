# __init__.py
from jobboard.models.job import Job
from jobboard.models.user import User

__all__ = [
	"Job",
	"User",
]

# auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from jobboard.database import get_db
from jobboard.models.user import User
from jobboard.routers.dependencies import get_current_user
from jobboard.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead
from jobboard.utils.jwt_handler import create_access_token
from jobboard.utils.password_hash import hash_password, verify_password


router = APIRouter()

logger = logging.getLogger(__name__)


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token({"sub": str(user.id)})
    return AuthResponse(access_token=token, token_type="bearer", user=UserRead.model_validate(user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)) -> AuthResponse:
    existing_user = db.query(User).filter(User.email == user_in.email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    user = User(
        email=user_in.email,
        password=hash_password(user_in.password),
        name=user_in.name,
        wallet_address=user_in.wallet_address,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user registered id=%s email=%s", user.id, user.email)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login_user(user_in: UserLogin, db: Session = Depends(get_db)) -> AuthResponse:
    user = db.query(User).filter(User.email == user_in.email).first()
    if not user or not verify_password(user_in.password, user.password):
        logger.info("login failed email=%s", user_in.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _auth_response(user)


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)

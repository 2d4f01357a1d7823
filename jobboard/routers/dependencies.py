# dependencies.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jobboard.config import build_eth_rpc_url, settings
from jobboard.database import get_db
from jobboard.models.user import User
from jobboard.schemas.user import TokenData
from jobboard.services.payment import EthereumRpcPaymentVerifier, PaymentVerifier, UnconfiguredPaymentVerifier
from jobboard.services.text_matching import SkillVocabulary
from jobboard.utils.jwt_handler import decode_access_token


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        token_data = TokenData(user_id=int(user_id))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject") from exc
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def build_skill_vocabulary() -> SkillVocabulary:
    if settings.skill_vocabulary:
        return SkillVocabulary.from_names(settings.skill_vocabulary)
    return SkillVocabulary.default()


def get_skill_vocabulary(request: Request) -> SkillVocabulary:
    # Built once at startup; fall back for apps created without the lifespan hook.
    vocabulary = getattr(request.app.state, "skill_vocabulary", None)
    if vocabulary is None:
        vocabulary = build_skill_vocabulary()
    return vocabulary


def get_payment_verifier() -> PaymentVerifier:
    rpc_url = build_eth_rpc_url(settings)
    if not rpc_url:
        return UnconfiguredPaymentVerifier()
    return EthereumRpcPaymentVerifier(rpc_url, timeout=settings.eth_rpc_timeout_seconds)

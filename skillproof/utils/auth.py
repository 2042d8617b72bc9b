from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from skillproof import config
from skillproof.database import get_db
from skillproof.models.user import User
from skillproof.utils.error_handler import NotAuthorizedError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(user_id: int, email: str) -> str:
    issued = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "email": email,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)).timestamp()),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Проверяет подпись и срок действия. Бросает NotAuthorizedError (401)."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        raise NotAuthorizedError(f"Invalid token: {e}", status_code=401) from e
    if "userId" not in payload:
        raise NotAuthorizedError("Invalid token: missing userId", status_code=401)
    return payload


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    payload = decode_access_token(token)
    user = db.get(User, payload["userId"])
    if not user:
        raise NotAuthorizedError("Invalid token", status_code=401)
    return user

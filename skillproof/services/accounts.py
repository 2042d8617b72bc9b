from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillproof.models.user import User
from skillproof.utils.auth import create_access_token, get_password_hash, verify_password
from skillproof.utils.error_handler import AlreadyExistsError, NotAuthorizedError, NotFoundError
from skillproof.utils.logger import logger


def register_user(db: Session, full_name: str, email: str, password: str, phone: Optional[str] = None) -> User:
    if db.query(User.id).filter(User.email == email).first():
        raise AlreadyExistsError("Email already registered", {"email": email})

    user = User(
        full_name=full_name,
        email=email,
        phone=phone,
        password_hash=get_password_hash(password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise AlreadyExistsError("Email already registered", {"email": email}) from e
    db.refresh(user)
    logger.info(f"User {user.id} registered")
    return user


def login_user(db: Session, email: str, password: str) -> Tuple[User, str]:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise NotAuthorizedError("Invalid email or password", status_code=401)
    return user, create_access_token(user.id, user.email)


def get_user_profile(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user

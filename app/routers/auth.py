from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.database import get_db
from app.utils.hashing import hash_password, verify_password
from app.utils.auth import create_access_token, get_current_user
from app.utils.errors import AuthError, ConflictError
from app.schemas.user import UserCreate, UserOut, Token
from app.models.user import User

import logging
logger = logging.getLogger("app.auth")


router = APIRouter(prefix="/auth", tags=["Auth"])


# self-registration always creates a student; staff accounts come from app.seed and /admin/users
@router.post("/register", response_model=UserOut, status_code=201)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    username = user_data.username.strip()

    exists = db.query(User.id).filter(User.username == username).first()
    if exists:
        raise ConflictError("Username already exists")

    new_user = User(
        username=username,
        password_hash=hash_password(user_data.password),
        role="student",
        first_name=user_data.first_name,
        last_name=user_data.last_name,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info("user %s registered", new_user.id)
    return new_user


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == form_data.username).first()
    if not user or not verify_password(form_data.password, user.password_hash):
        logger.info("failed login for %r", form_data.username)
        raise AuthError("Invalid credentials")

    token = create_access_token({"sub": user.username, "role": user.role})
    return Token(access_token=token)


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user

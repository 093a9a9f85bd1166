from datetime import datetime, timedelta
from jose import jwt, JWTError
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from app.config import settings
from app.database import get_db
from sqlalchemy.orm import Session
from app.models.user import User
from app.utils.errors import AuthError, ForbiddenError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def create_access_token(data: dict, expires_minutes: int | None = None):
    to_encode = data.copy()
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.utcnow() + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    token = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthError("Invalid authentication token")

    username = payload.get("sub")
    if username is None:
        raise AuthError("Invalid token")

    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise AuthError("User not found")

    return user


def require_roles(*roles: str):
    def _dep(user=Depends(get_current_user)):
        if getattr(user, "role", None) not in roles:
            raise ForbiddenError(f"Requires role: {', '.join(roles)}")
        return user
    return _dep


require_admin = require_roles("admin")
require_staff = require_roles("admin", "teacher")

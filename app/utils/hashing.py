from passlib.context import CryptContext

from app.utils.errors import ValidationError

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    if not password:
        raise ValidationError("Password must not be empty", field="password")
    if _too_long(password):
        raise ValidationError(f"Password too long (max {MAX_PASSWORD_BYTES} bytes)", field="password")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # a password that could never have been stored simply does not match
    if _too_long(plain_password):
        return False
    return pwd_context.verify(plain_password, hashed_password)

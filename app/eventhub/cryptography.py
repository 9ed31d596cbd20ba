from enum import Enum
from passlib.context import CryptContext
from passlib.exc import UnknownHashError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasswordVerificationResult(Enum):
    FAILED = 0
    SUCCESS = 1
    SUCCESS_REHASH_NEEDED = 2


# ``user`` is accepted so a per-user salt or pepper can be plugged in without
# changing callers; the current scheme does not need it.
def hash_password(user, password: str) -> str:
    return pwd_context.hash(password)


def verify_password(user, hashed_password: str, plain_password: str) -> PasswordVerificationResult:
    if not hashed_password or plain_password is None:
        return PasswordVerificationResult.FAILED
    try:
        verified = pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        return PasswordVerificationResult.FAILED

    if not verified:
        return PasswordVerificationResult.FAILED
    if pwd_context.needs_update(hashed_password):
        return PasswordVerificationResult.SUCCESS_REHASH_NEEDED
    return PasswordVerificationResult.SUCCESS

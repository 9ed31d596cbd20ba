from sqlalchemy.orm import Session, selectinload

from eventhub.constant_file import ROLE_USER
from eventhub.cryptography import PasswordVerificationResult, hash_password, verify_password
from eventhub.logger import get_logger
from eventhub.models.user_model import Role, User
from eventhub.repository.refresh_token_repository import RefreshTokenRepository
from eventhub.repository.repository import Repository
from eventhub.result import ErrorType, Result
from eventhub.schema.user_schema import LoginUserRequest, RegisterUserRequest
from eventhub.token_issuer import TokenIssuer, TokenPair

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ------------------ Register ------------------
async def register_user(db: Session, request: RegisterUserRequest) -> Result[bool]:
    users = Repository(db, User)
    roles = Repository(db, Role)
    email = normalize_email(request.email)

    existing = await users.get_first_or_default(User.email == email)
    if existing.is_failure:
        return existing.forward()
    if existing.value is not None:
        return Result.failure(f"User with email {email} already exists.", ErrorType.ALREADY_EXISTS)

    default_role = await roles.get_first_or_default(Role.name == ROLE_USER)
    if default_role.is_failure:
        return default_role.forward()
    if default_role.value is None:
        logger.error("default_role_missing", role=ROLE_USER)
        return Result.failure(f"Role '{ROLE_USER}' is not configured.", ErrorType.DATABASE_ERROR)

    user = User(
        first_name=request.first_name.strip(),
        last_name=request.last_name.strip(),
        email=email,
        date_of_birth=request.date_of_birth,
    )
    user.password_hash = hash_password(user, request.password)
    user.roles.append(default_role.value)

    # User row and role link land in one commit
    users.insert(user)
    saved = await users.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("user_registered", user_id=str(user.id))
    return Result.success(True)


# ------------------ Login ------------------
async def login_user(db: Session, issuer: TokenIssuer, request: LoginUserRequest) -> Result[TokenPair]:
    users = Repository(db, User)
    email = normalize_email(request.email)

    found = await users.get_first_or_default(User.email == email, options=[selectinload(User.roles)])
    if found.is_failure:
        return found.forward()

    user = found.value
    if user is None:
        logger.info("login_failed", reason="unknown_email")
        return Result.failure(INVALID_CREDENTIALS, ErrorType.INVALID_INPUT)

    verification = verify_password(user, user.password_hash, request.password)
    if verification == PasswordVerificationResult.FAILED:
        logger.info("login_failed", reason="bad_password", user_id=str(user.id))
        return Result.failure(INVALID_CREDENTIALS, ErrorType.INVALID_INPUT)

    if verification == PasswordVerificationResult.SUCCESS_REHASH_NEEDED:
        # Committed together with the new refresh token
        user.password_hash = hash_password(user, request.password)

    tokens = await issuer.generate_tokens(db, user)
    if tokens.is_success:
        logger.info("login_succeeded", user_id=str(user.id))
    return tokens


# ------------------ Refresh ------------------
async def refresh_token(db: Session, issuer: TokenIssuer, old_refresh_token: str) -> Result[TokenPair]:
    if not old_refresh_token:
        return Result.failure("Refresh token is required.", ErrorType.INVALID_INPUT)
    return await issuer.refresh_tokens(db, old_refresh_token)


# ------------------ Logout ------------------
async def logout(db: Session, refresh_token_value: str) -> Result[bool]:
    """Revoke one session. Succeeds for empty, unknown or already revoked tokens."""
    if not refresh_token_value:
        return Result.success(True)

    tokens = RefreshTokenRepository(db)
    found = await tokens.get_by_token(refresh_token_value)
    if found.is_failure:
        return found.forward()

    stored = found.value
    if stored is None or stored.is_revoked:
        return Result.success(True)

    revoked = await tokens.revoke_if_active(stored.id)
    if revoked.is_failure:
        return revoked.forward()

    saved = await tokens.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("logout", user_id=str(stored.user_id))
    return Result.success(True)


async def logout_all(db: Session, user_id) -> Result[int]:
    """Revoke every active refresh token of ``user_id``; the value is how many."""
    tokens = RefreshTokenRepository(db)

    revoked = await tokens.revoke_all_for_user(user_id)
    if revoked.is_failure:
        return revoked.forward()

    saved = await tokens.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("logout_all", user_id=str(user_id), revoked=revoked.value)
    return Result.success(revoked.value)

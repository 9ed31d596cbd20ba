import base64
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, Optional

import jwt
from sqlalchemy.orm import Session

from eventhub import constant_file
from eventhub.logger import get_logger
from eventhub.models.refresh_token_model import RefreshToken
from eventhub.models.utils import utcnow
from eventhub.repository.refresh_token_repository import RefreshTokenRepository
from eventhub.result import ErrorType, Result

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def build_claims(user_id, email: str, first_name: str, last_name: str, roles: Iterable[str]) -> Dict[str, Any]:
    """Identity claims for an access token; one ``role`` entry per assigned role."""
    return {
        "Id": str(user_id),
        "sub": str(user_id),
        "email": email,
        "given_name": first_name,
        "family_name": last_name,
        "role": sorted(roles),
    }


def generate_refresh_token_string(num_bytes: int = constant_file.refresh_token_bytes) -> str:
    return base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii")


class TokenIssuer:
    """Mints access/refresh token pairs and rotates refresh tokens.

    Access tokens are signed JWTs that are never stored. Refresh tokens are opaque
    random strings persisted in ``refresh_tokens``; rotation revokes the old row and
    issues a new pair in the same transaction.

    A missing signing key raises ``RuntimeError`` on construction, so the
    application refuses to start rather than failing per request.
    """

    def __init__(
        self,
        secret_key: Optional[str],
        algorithm: str = "HS256",
        access_token_expires: timedelta = timedelta(minutes=15),
        refresh_token_expires: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret_key:
            raise RuntimeError("JWT_SECRET_KEY is not configured.")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expires = access_token_expires
        self.refresh_token_expires = refresh_token_expires
        self.clock = clock

    @classmethod
    def from_env(cls) -> "TokenIssuer":
        return cls(
            secret_key=constant_file.jwt_secret_key,
            algorithm=constant_file.jwt_algorithm,
            access_token_expires=timedelta(minutes=constant_file.access_token_expires_minutes),
            refresh_token_expires=timedelta(days=constant_file.refresh_token_expires_days),
        )

    # ------------------ Access token ------------------
    def create_access_token(self, user) -> str:
        now = self.clock().replace(tzinfo=timezone.utc)
        payload = build_claims(user.id, user.email, user.first_name, user.last_name, user.role_names)
        payload["iat"] = int(now.timestamp())
        payload["exp"] = int((now + self.access_token_expires).timestamp())
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """Verify signature and expiry. Raises ``jwt.InvalidTokenError`` on failure."""
        return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])

    # ------------------ Token pair ------------------
    async def generate_tokens(self, db: Session, user) -> Result[TokenPair]:
        repo = RefreshTokenRepository(db)

        access_token = self.create_access_token(user)
        refresh_token = generate_refresh_token_string()

        now = self.clock()
        repo.insert(RefreshToken(
            token=refresh_token,
            user_id=user.id,
            added_at=now,
            expires_at=now + self.refresh_token_expires,
        ))

        saved = await repo.save_changes()
        if saved.is_failure:
            return saved.forward()

        return Result.success(TokenPair(access_token=access_token, refresh_token=refresh_token))

    async def refresh_tokens(self, db: Session, old_refresh_token: str) -> Result[TokenPair]:
        repo = RefreshTokenRepository(db)

        found = await repo.get_by_token(old_refresh_token, with_owner=True)
        if found.is_failure:
            return found.forward()

        stored = found.value
        if stored is None:
            return Result.failure("Refresh token not found.", ErrorType.RECORD_NOT_FOUND)

        if stored.is_revoked:
            logger.warning("refresh_token_reused", user_id=str(stored.user_id))
            return Result.failure("Refresh token is revoked.", ErrorType.FORBIDDEN)

        if stored.is_expired(self.clock()):
            revoked = await repo.revoke_if_active(stored.id)
            if revoked.is_failure:
                return revoked.forward()
            saved = await repo.save_changes()
            if saved.is_failure:
                return saved.forward()
            logger.info("refresh_token_expired", user_id=str(stored.user_id))
            return Result.failure("Refresh token is expired.", ErrorType.FORBIDDEN)

        revoked = await repo.revoke_if_active(stored.id)
        if revoked.is_failure:
            return revoked.forward()
        if not revoked.value:
            # Lost a race against a concurrent refresh or logout
            db.rollback()
            return Result.failure("Refresh token is revoked.", ErrorType.FORBIDDEN)

        user = stored.user
        if user is None:
            db.rollback()
            return Result.failure("User not found.", ErrorType.RECORD_NOT_FOUND)

        pair = await self.generate_tokens(db, user)
        if pair.is_success:
            logger.info("refresh_token_rotated", user_id=str(user.id))
        return pair

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from eventhub.models.refresh_token_model import RefreshToken
from eventhub.models.user_model import User
from eventhub.repository.repository import Repository
from eventhub.result import Result


class RefreshTokenRepository(Repository[RefreshToken]):
    def __init__(self, db: Session):
        super().__init__(db, RefreshToken)

    async def get_by_token(self, token: str, with_owner: bool = False) -> Result:
        options = [selectinload(RefreshToken.user).selectinload(User.roles)] if with_owner else []
        return await self.get_first_or_default(RefreshToken.token == token, options=options)

    async def revoke_if_active(self, token_id) -> Result[bool]:
        """Flip ``is_revoked`` only if it is still false.

        The success value tells whether this call did the revoking; ``False`` means
        someone else got there first. Not committed.
        """
        try:
            affected = (
                self.db.query(RefreshToken)
                .filter(RefreshToken.id == token_id, RefreshToken.is_revoked.is_(False))
                .update({RefreshToken.is_revoked: True}, synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            return self._fail("revoking", e)
        return Result.success(affected == 1)

    async def revoke_all_for_user(self, user_id) -> Result[int]:
        try:
            affected = (
                self.db.query(RefreshToken)
                .filter(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
                .update({RefreshToken.is_revoked: True}, synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            return self._fail("revoking", e)
        return Result.success(affected)

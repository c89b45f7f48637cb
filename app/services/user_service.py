import logging
from typing import Optional

from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreUpdateError
from app.models.user import User
from app.schemas.viewer import GoogleProfile


logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class UserService:
    """
    Service class for user record operations.

    Every write path commits exactly once, so a half-updated user is
    never visible to other requests.
    """

    @staticmethod
    async def get_user(user_id: Optional[str], db: AsyncSession) -> Optional[User]:
        """
        Get a user by id.

        Args:
            user_id: Google person id (may be None).
            db: Database session.

        Returns:
            Optional[User]: User if found.
        """
        if not user_id:
            return None
        return await db.get(User, user_id)

    @staticmethod
    async def upsert_from_profile(
        profile: GoogleProfile,
        token: str,
        db: AsyncSession
    ) -> tuple[User, bool]:
        """
        Create or update a user from a Google profile.

        Existing users get their name, avatar, contact and token refreshed;
        income, wallet, listings and bookings are left as they are. New users
        start with zero income and no listings or bookings.

        The write is a single INSERT ... ON CONFLICT DO UPDATE, so two first
        logins racing for the same person both succeed and the last one to
        commit owns the token.

        Args:
            profile: Extracted Google profile.
            token: Freshly issued session token.
            db: Database session.

        Returns:
            tuple: (User object, True if it was created)

        Raises:
            StoreUpdateError: If the database dialect has no upsert support.
        """
        dialect = db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise StoreUpdateError(f"Upsert is not supported on {dialect}")

        created = await UserService.get_user(profile.id, db) is None

        stmt = insert(User).values(
            id=profile.id,
            token=token,
            name=profile.name,
            avatar=profile.avatar,
            contact=profile.contact,
            income=0,
            listings=[],
            bookings=[],
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.id],
            set_={
                "name": stmt.excluded.name,
                "avatar": stmt.excluded.avatar,
                "contact": stmt.excluded.contact,
                "token": stmt.excluded.token,
            },
        ).returning(User)

        result = await db.scalars(stmt, execution_options={"populate_existing": True})
        user = result.one()
        await db.commit()

        if created:
            logger.info(f"Created new user: {user.id}")
        else:
            logger.info(f"Updated profile and rotated token for user: {user.id}")
        return user, created

    @staticmethod
    async def rotate_token(user_id: Optional[str], token: str, db: AsyncSession) -> Optional[User]:
        """
        Overwrite the session token of an existing user.

        Args:
            user_id: Google person id from the session cookie.
            token: Freshly issued session token.
            db: Database session.

        Returns:
            Optional[User]: Updated user, or None if no user has that id.
        """
        user = await UserService.get_user(user_id, db)
        if not user:
            return None

        user.token = token
        await db.commit()

        logger.info(f"Rotated session token for user: {user.id}")
        return user

    @staticmethod
    async def set_wallet(user_id: str, wallet_id: Optional[str], db: AsyncSession) -> User:
        """
        Link or unlink a user's Stripe account.

        Args:
            user_id: User to update.
            wallet_id: Stripe connected account id, or None to unlink.
            db: Database session.

        Returns:
            User: Updated user.

        Raises:
            StoreUpdateError: If the user no longer exists.
        """
        user = await UserService.get_user(user_id, db)
        if not user:
            raise StoreUpdateError(f"User {user_id} could not be updated")

        user.wallet_id = wallet_id
        await db.commit()

        logger.info(f"{'Linked' if wallet_id else 'Unlinked'} wallet for user: {user.id}")
        return user

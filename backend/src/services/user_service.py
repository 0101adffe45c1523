"""
User directory: maps identity-provider subjects to local users.

Users are created lazily on first authenticated interaction (POST /users/me) and are never
updated or deleted afterwards.
"""
import logging

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from core.constants import ANONYMOUS_NAME, Role
from core.exceptions import AuthRequiredError
from models.user import AdminBootstrap, User
from schemas.identity import Identity

logger = logging.getLogger(__name__)

ADMIN_BOOTSTRAP_ID = 1


def _insert_for(db: AsyncSession, model: type) -> postgresql.Insert | sqlite.Insert:
    """Dialect-specific INSERT so we can use ON CONFLICT DO NOTHING."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite.insert(model)
    return postgresql.insert(model)


async def get_user_by_subject(db: AsyncSession, subject: str) -> User | None:
    """Look up a user by identity subject."""
    result = await db.execute(select(User).where(User.user_id == subject))
    return result.scalar_one_or_none()


async def _claim_admin(db: AsyncSession, subject: str) -> bool:
    """
    Try to claim the single admin-bootstrap marker row.

    Returns True only for the one transaction whose insert lands. Concurrent claimants block
    on the primary key until the winner commits, then see the conflict and get False.
    """
    stmt = (
        _insert_for(db, AdminBootstrap)
        .values(id=ADMIN_BOOTSTRAP_ID, user_id=subject)
        .on_conflict_do_nothing(index_elements=["id"])
        .returning(AdminBootstrap.id)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None


async def get_or_create_user(db: AsyncSession, identity: Identity | None) -> User:
    """
    Return the caller's user, provisioning it on first sight.

    Idempotent: an existing user is returned unchanged. A new user becomes admin only if it
    wins the admin-bootstrap claim; everyone else gets the regular user role.

    Raises:
        AuthRequiredError: If the caller is unauthenticated.
    """
    if identity is None:
        raise AuthRequiredError()

    existing = await get_user_by_subject(db, identity.subject)
    if existing is not None:
        return existing

    is_first = await _claim_admin(db, identity.subject)
    role = Role.ADMIN if is_first else Role.USER
    stmt = (
        _insert_for(db, User)
        .values(
            user_id=identity.subject,
            name=identity.name or identity.email or ANONYMOUS_NAME,
            email=identity.email or "",
            role=role.value,
        )
        .on_conflict_do_nothing(index_elements=["user_id"])
    )
    await db.execute(stmt)

    # Re-read: a concurrent request for the same subject may have inserted first
    user = await get_user_by_subject(db, identity.subject)
    if user is None:
        raise RuntimeError(f"User {identity.subject!r} missing after insert")
    logger.info(
        "user_provisioned",
        extra={"user_id": user.user_id, "role": user.role},
    )
    return user


async def get_current_user(db: AsyncSession, identity: Identity | None) -> User | None:
    """Return the caller's user, or None if unauthenticated or not yet provisioned."""
    if identity is None:
        return None
    return await get_user_by_subject(db, identity.subject)


async def is_admin(db: AsyncSession, identity: Identity | None) -> bool:
    """True only for a provisioned caller holding the admin role."""
    user = await get_current_user(db, identity)
    return user is not None and user.role == Role.ADMIN.value


async def require_user(db: AsyncSession, identity: Identity | None) -> User:
    """
    Return the caller's provisioned user.

    Raises:
        AuthRequiredError: If unauthenticated or not provisioned (no implicit provisioning).
    """
    user = await get_current_user(db, identity)
    if user is None:
        raise AuthRequiredError()
    return user

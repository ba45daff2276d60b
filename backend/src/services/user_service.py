"""Service layer for user accounts: sign-in, profile, and account deletion."""
import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.passwords import hash_password, verify_password
from models.user import User, default_roles
from services.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "Email is already taken by another user"


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively and without surrounding whitespace."""
    return email.strip().lower()


async def get_user(db: AsyncSession, user_id: UUID) -> User | None:
    """Get a user by id."""
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by (normalized) email."""
    result = await db.execute(
        select(User).where(User.email == normalize_email(email)),
    )
    return result.scalar_one_or_none()


async def _insert_user(db: AsyncSession, user: User) -> User | None:
    """
    Insert a new user inside a savepoint.

    Returns None if the email was taken concurrently (unique constraint).
    """
    try:
        async with db.begin_nested():
            db.add(user)
    except IntegrityError:
        return None
    logger.info("Created user %s", user.id)
    return user


async def get_or_create_external_user(
    db: AsyncSession,
    email: str,
    name: str | None = None,
    image: str | None = None,
) -> User:
    """
    Get the user for an externally authenticated email, creating it on first sign-in.

    External users have no password hash. Handles the race where two concurrent
    requests try to create the same user: the loser re-reads the winner's row.

    Note: Uses flush(), not commit. Session generator handles commit at request end.
    """
    email = normalize_email(email)
    user = await get_user_by_email(db, email)
    if user is not None:
        return user

    created = await _insert_user(
        db,
        User(
            email=email,
            name=name or email.split("@")[0],
            image=image,
            is_active=True,
            roles=default_roles(),
        ),
    )
    if created is not None:
        return created

    user = await get_user_by_email(db, email)
    if user is None:
        raise ConflictError(EMAIL_TAKEN_MESSAGE, field="email")
    return user


async def sign_in_email_password(
    db: AsyncSession,
    email: str | None,
    password: str | None,
    bcrypt_rounds: int,
) -> User | None:
    """
    Authenticate with email and password.

    An unknown email signs up a new credential user on the spot (name taken from
    the email's local part). A known email must match the stored bcrypt hash.

    Returns:
        The signed-in user, or None if credentials are missing or wrong, or the
        user is inactive.
    """
    if not email or not email.strip() or not password:
        return None

    email = normalize_email(email)
    user = await get_user_by_email(db, email)

    if user is None:
        user = await _insert_user(
            db,
            User(
                email=email,
                password_hash=hash_password(password, bcrypt_rounds),
                name=email.split("@")[0],
                is_active=True,
                roles=default_roles(),
            ),
        )
        if user is not None:
            return user
        # Created concurrently by another request; verify against that row
        user = await get_user_by_email(db, email)
        if user is None:
            return None

    if not verify_password(password, user.password_hash):
        return None

    if not user.is_active:
        logger.warning("Rejected sign-in for inactive user %s", user.id)
        return None

    return user


async def update_profile(  # noqa: PLR0913
    db: AsyncSession,
    user_id: UUID,
    bcrypt_rounds: int,
    name: str | None = None,
    email: str | None = None,
    current_password: str | None = None,
    new_password: str | None = None,
    image: str | None = None,
) -> tuple[User, bool]:
    """
    Update the fields of a user's profile that were provided and differ.

    A password change needs both the current and the new password.

    Returns:
        Tuple of (user, changed). `changed` is False when nothing differed.

    Raises:
        NotFoundError: If the user no longer exists.
        ConflictError: If the new email belongs to another user.
        ValidationError: If the current password is missing or wrong.
    """
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User")

    changes: dict[str, str] = {}

    if name and name.strip() and name.strip() != user.name:
        changes["name"] = name.strip()

    if email and email.strip() and normalize_email(email) != user.email:
        new_email = normalize_email(email)
        existing = await get_user_by_email(db, new_email)
        if existing is not None and existing.id != user.id:
            raise ConflictError(EMAIL_TAKEN_MESSAGE, field="email")
        changes["email"] = new_email

    if current_password and new_password:
        if not user.password_hash:
            raise ValidationError(
                "current_password", "Current password is required to change password",
            )
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("current_password", "Current password is incorrect")
        changes["password_hash"] = hash_password(new_password, bcrypt_rounds)

    if image and image != user.image:
        changes["image"] = image

    if not changes:
        return user, False

    try:
        async with db.begin_nested():
            for field, value in changes.items():
                setattr(user, field, value)
    except IntegrityError as e:
        # Email claimed by another request between the check and the flush
        raise ConflictError(EMAIL_TAKEN_MESSAGE, field="email") from e

    await db.refresh(user)
    return user, True


async def delete_account(
    db: AsyncSession,
    user_id: UUID,
    password: str | None,
) -> None:
    """
    Delete a user and, through ON DELETE CASCADE, their todos and categories.

    Credential users must confirm with their password. Externally authenticated
    users (no password hash) have nothing to confirm with and skip the check.

    Raises:
        NotFoundError: If the user no longer exists.
        ValidationError: If a required password is missing or wrong.
    """
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User")

    if user.password_hash:
        if not password:
            raise ValidationError("password", "Password is required to delete account")
        if not verify_password(password, user.password_hash):
            raise ValidationError("password", "Password is incorrect")

    await db.execute(
        delete(User)
        .where(User.id == user_id)
        .execution_options(synchronize_session=False),
    )
    db.expunge(user)
    logger.info("Deleted user %s", user_id)

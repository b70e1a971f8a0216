"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payroll_records.database import init_db
from payroll_records.errors import NotFoundError
from payroll_records.models import User
from payroll_records.services.user_service import UserService


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory dependency (overridden in tests)."""
    _, factory = init_db()
    return factory


async def get_db_session(
    factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency; uncommitted work is rolled back on close."""
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_acting_user(
    db: DbSession,
    x_user_id: Annotated[int | None, Header()] = None,
) -> User | None:
    """Resolve the acting user from the X-User-ID header, if given."""
    if x_user_id is None:
        return None
    try:
        return await UserService(db).get_user(x_user_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unknown X-User-ID",
        )


# Type aliases for cleaner dependency injection
ActingUser = Annotated[User | None, Depends(get_acting_user)]

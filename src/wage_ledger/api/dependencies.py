"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from wage_ledger.context import Actor
from wage_ledger.database import init_db

MANAGER = "manager"
OWNER = "owner"
LABOUR = "labour"


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Build the caller identity asserted by the authentication proxy."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id and X-Actor-Role headers are required",
        )
    try:
        actor_id = int(x_actor_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Actor-Id format",
        )
    return Actor(id=actor_id, role=x_actor_role.strip().lower())


def require_role(*roles: str) -> Callable[..., Awaitable[Actor]]:
    """Dependency factory admitting only callers with one of the given roles."""
    allowed = {role.lower() for role in roles}

    async def check_role(actor: Annotated[Actor, Depends(get_actor)]) -> Actor:
        if actor.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{actor.role}' may not perform this action",
            )
        return actor

    return check_role


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
ManagerActor = Annotated[Actor, Depends(require_role(MANAGER))]
ReaderActor = Annotated[Actor, Depends(require_role(MANAGER, OWNER))]
LabourActor = Annotated[Actor, Depends(require_role(LABOUR))]

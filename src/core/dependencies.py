from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings, get_settings
from src.core.exceptions import AuthenticationError
from src.core.security import decode_token
from src.database import async_session_maker
from src.schemas.auth import OperatorResponse
from src.services import storage
from src.services.engine import ParkingEngine

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_now() -> datetime:
    return datetime.now(UTC)


def get_today(now: Annotated[datetime, Depends(get_now)]) -> date:
    return now.date()


async def get_engine(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AsyncGenerator[ParkingEngine, None]:
    engine: ParkingEngine = request.app.state.parking_engine
    version = engine.version
    yield engine
    if engine.version != version:
        await storage.save_snapshot(db, engine)


async def get_current_operator(
    token: Annotated[str, Depends(oauth2_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> OperatorResponse:
    payload = decode_token(token)
    if payload is None:
        raise AuthenticationError()

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    username = payload.get("sub")
    if username != settings.admin_username:
        raise AuthenticationError("Unknown operator")

    return OperatorResponse(username=username)


# Type aliases for cleaner dependency injection
Engine = Annotated[ParkingEngine, Depends(get_engine)]
Now = Annotated[datetime, Depends(get_now)]
Today = Annotated[date, Depends(get_today)]
AppSettings = Annotated[Settings, Depends(get_settings)]
OperatorUser = Annotated[OperatorResponse, Depends(get_current_operator)]

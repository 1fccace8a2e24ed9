from datetime import date

from fastapi import APIRouter, Query

from src.core.dependencies import AppSettings, Engine, Now, OperatorUser
from src.schemas.common import MessageResponse
from src.schemas.session import (
    LiveFeeResponse,
    ParkingSession,
    SessionExitResponse,
    SessionListResponse,
    SessionStartRequest,
)
from src.services import report as report_service
from src.utils.constants import SessionStatusFilter

router = APIRouter(prefix="/sessions", tags=["Parking Sessions"])


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    engine: Engine,
    operator: OperatorUser,
    plate: str = Query(""),
    status: SessionStatusFilter = Query(SessionStatusFilter.ALL),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
):
    sessions = report_service.filter_sessions(
        engine.sessions, plate, status, start_date, end_date
    )
    return SessionListResponse(sessions=sessions, total=len(sessions))


@router.post("", response_model=ParkingSession)
async def start_session(
    engine: Engine, operator: OperatorUser, now: Now, data: SessionStartRequest
):
    return engine.start_session(data.plate_number, data.slot_id, now)


@router.get("/{session_id}", response_model=ParkingSession)
async def get_session(engine: Engine, operator: OperatorUser, session_id: str):
    return engine.get_session(session_id)


@router.get("/{session_id}/fee", response_model=LiveFeeResponse)
async def get_live_fee(
    engine: Engine, operator: OperatorUser, settings: AppSettings, now: Now, session_id: str
):
    """Running fee for an active session, or the billed fee of a completed one."""
    session = engine.get_session(session_id)
    return LiveFeeResponse(
        session_id=session.id,
        status=session.status,
        entry_time=session.entry_time,
        as_of=session.exit_time or now,
        fee=engine.current_fee(session_id, now),
        currency=settings.currency,
    )


@router.post("/{session_id}/checkout", response_model=SessionExitResponse)
async def checkout(
    engine: Engine, operator: OperatorUser, settings: AppSettings, now: Now, session_id: str
):
    session, payment = engine.end_session(session_id, now)
    return SessionExitResponse(session=session, payment=payment, currency=settings.currency)


@router.delete("/{session_id}", response_model=MessageResponse)
async def delete_session(engine: Engine, operator: OperatorUser, session_id: str):
    engine.delete_session(session_id)
    return MessageResponse(message="Parking record deleted successfully")

from fastapi import APIRouter

from src.api.v1 import (
    auth,
    payments,
    reports,
    sessions,
    slots,
    vehicles,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth.router)
api_router.include_router(vehicles.router)
api_router.include_router(slots.router)
api_router.include_router(sessions.router)
api_router.include_router(payments.router)
api_router.include_router(reports.router)

from fastapi import APIRouter, Query

from src.core.dependencies import Engine, OperatorUser
from src.schemas.vehicle import Vehicle, VehicleCreate, VehicleListResponse
from src.services import report as report_service

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(engine: Engine, operator: OperatorUser, q: str = Query("")):
    vehicles = report_service.filter_vehicles(engine.vehicles, q)
    return VehicleListResponse(vehicles=vehicles, total=len(vehicles))


@router.post("", response_model=Vehicle)
async def register_vehicle(engine: Engine, operator: OperatorUser, data: VehicleCreate):
    return engine.register_vehicle(data.plate_number, data.driver_name, data.phone_number)


@router.get("/{plate_number}", response_model=Vehicle)
async def get_vehicle(engine: Engine, operator: OperatorUser, plate_number: str):
    return engine.get_vehicle(plate_number)

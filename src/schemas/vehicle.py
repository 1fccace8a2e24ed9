from pydantic import field_validator

from src.schemas.common import BaseSchema, RecordSchema


class VehicleCreate(BaseSchema):
    plate_number: str
    driver_name: str
    phone_number: str | None = None

    @field_validator("plate_number", "driver_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("plate_number")
    @classmethod
    def validate_plate_number(cls, v: str) -> str:
        if len(v) > 20:
            raise ValueError("Plate number cannot exceed 20 characters")
        return v.upper()


class Vehicle(RecordSchema):
    plate_number: str
    driver_name: str
    phone_number: str | None = None


class VehicleListResponse(BaseSchema):
    vehicles: list[Vehicle]
    total: int

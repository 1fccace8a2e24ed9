from fastapi import HTTPException, status


class SmartParkException(HTTPException):
    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An error occurred",
    ):
        super().__init__(status_code=status_code, detail=detail)


class AuthenticationError(SmartParkException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class InvalidInputError(SmartParkException):
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class DuplicateVehicleError(SmartParkException):
    def __init__(self, detail: str = "Vehicle already registered"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class DuplicateSlotError(SmartParkException):
    def __init__(self, detail: str = "Slot number already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnknownVehicleError(SmartParkException):
    def __init__(self, detail: str = "Vehicle not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnknownSlotError(SmartParkException):
    def __init__(self, detail: str = "Slot not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnknownSessionError(SmartParkException):
    def __init__(self, detail: str = "Session not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class SlotOccupiedError(SmartParkException):
    def __init__(self, detail: str = "Parking slot is not available"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class VehicleAlreadyParkedError(SmartParkException):
    def __init__(self, detail: str = "Vehicle already has an active parking session"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class SessionNotActiveError(SmartParkException):
    def __init__(self, detail: str = "Session is not active"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidIntervalError(SmartParkException):
    def __init__(self, detail: str = "Exit time is before entry time"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

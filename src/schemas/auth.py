from src.schemas.common import BaseSchema


class Token(BaseSchema):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseSchema):
    username: str
    password: str


class OperatorResponse(BaseSchema):
    username: str

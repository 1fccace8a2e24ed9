from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from src.core.dependencies import AppSettings, OperatorUser
from src.schemas.auth import LoginRequest, OperatorResponse, Token
from src.schemas.common import MessageResponse
from src.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
async def login(settings: AppSettings, form_data: Annotated[OAuth2PasswordRequestForm, Depends()]):
    data = LoginRequest(username=form_data.username, password=form_data.password)
    return auth_service.authenticate_operator(data, settings)


@router.post("/logout", response_model=MessageResponse)
async def logout(operator: OperatorUser):
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=OperatorResponse)
async def get_current_operator(operator: OperatorUser):
    return operator

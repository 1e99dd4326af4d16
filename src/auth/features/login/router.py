from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr

from src.auth.dtos import InvalidCredentialsError
from src.auth.guard import get_identity_provider
from src.auth.repository.identity import IdentityProvider
from src.auth.urls import LOGIN_URL

router = APIRouter()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post(LOGIN_URL, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    try:
        token = await identity.sign_in(email=request.email, password=request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return LoginResponse(access_token=token.access_token, token_type=token.token_type)

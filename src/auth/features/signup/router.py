from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field

from src.auth.dtos import Principal, Role, UserAlreadyExistsError
from src.auth.guard import get_identity_provider, require_session
from src.auth.repository.identity import IdentityProvider
from src.auth.urls import ME_URL, SIGNUP_URL

router = APIRouter()


class SignupRequest(BaseModel):
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=6, max_length=72)
    role: Role = Role.ADMIN


class UserResponse(BaseModel):
    id: UUID
    email: str
    role: Role


@router.post(SIGNUP_URL, response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserResponse:
    """
    Create an organizer (`admin`) or hotel partner (`hotel`) account.
    """
    try:
        user = await identity.sign_up(
            email=request.email, password=request.password, role=request.role
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return UserResponse(id=user.id, email=user.email, role=user.role)


@router.get(ME_URL, response_model=UserResponse)
async def me(principal: Principal = Depends(require_session)) -> UserResponse:
    return UserResponse(id=principal.user_id, email=principal.email, role=principal.role)

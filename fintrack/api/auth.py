from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import get_current_user
from fintrack.core.database import get_db
from fintrack.models.user import User
from fintrack.schemas.common import MessageResponse
from fintrack.schemas.user import AuthResponse, ChangePasswordRequest, LoginRequest, RegisterRequest, UserEnvelope
from fintrack.services.users import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    token, user = await AuthService.register(db, data)
    return {"token": token, "user": user}


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    token, user = await AuthService.login(db, data)
    return {"token": token, "user": user}


@router.get("/current-user", response_model=UserEnvelope)
async def current_user(user: User = Depends(get_current_user)):
    return {"user": user}


@router.post("/change-password", response_model=MessageResponse)
async def change_password(data: ChangePasswordRequest, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    await AuthService.change_password(db, user, data)
    return {"message": "Password updated successfully"}

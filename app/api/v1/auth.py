"""
Authentication endpoints.
"""

from fastapi import APIRouter, Depends, Response, status

from app.api import deps
from app.config.settings import settings
from app.models.user.user import User
from app.schemas.auth import AdminRegisterRequest, LoginRequest, LoginResponse
from app.schemas.common.response import MessageResponse, SuccessResponse
from app.schemas.student.student_response import StudentResponse
from app.schemas.user.user_response import ProfileResponse, UserResponse
from app.schemas.warden.warden import WardenResponse
from app.services.auth.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register/admin",
    response_model=SuccessResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_admin(
    payload: AdminRegisterRequest,
    auth: AuthService = Depends(deps.get_auth_service),
):
    user = auth.register_admin(payload)
    return SuccessResponse[UserResponse].create(
        "Admin registered successfully",
        UserResponse.model_validate(user),
    )


@router.post("/login", response_model=SuccessResponse[LoginResponse])
def login(
    payload: LoginRequest,
    response: Response,
    auth: AuthService = Depends(deps.get_auth_service),
):
    user, token = auth.login(payload.email, payload.password, payload.role)
    max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
    )
    return SuccessResponse[LoginResponse].create(
        "Login successful",
        LoginResponse(access_token=token, expires_in=max_age, user=UserResponse.model_validate(user)),
    )


@router.get("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=SuccessResponse[ProfileResponse])
def read_me(current_user: User = Depends(deps.get_current_user)):
    student = current_user.student_profile
    warden = current_user.warden_profile
    profile = ProfileResponse(
        user=UserResponse.model_validate(current_user),
        student=StudentResponse.model_validate(student) if student else None,
        warden=WardenResponse.model_validate(warden) if warden else None,
    )
    return SuccessResponse[ProfileResponse].create("Profile fetched", profile)

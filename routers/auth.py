from fastapi import APIRouter, Depends

from auth import AuthService, get_auth_service
from responses import success
from schemas import LoginRequest, SignupRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup")
def signup(payload: SignupRequest, service: AuthService = Depends(get_auth_service)):
    user, token = service.signup(payload.name, payload.email, payload.password)
    return success("Signup successful", {"user": user, "token": token})


@router.post("/login")
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    user, token = service.login(payload.email, payload.password)
    return success("Login successful", {"user": user, "token": token})

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import Settings, get_settings
from database import USERS, get_db, parse_object_id, sanitize
from errors import AuthFailureError, BadRequestError, ConflictError
from schemas import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

INVALID_CREDENTIALS = "Incorrect email or password"
INVALID_TOKEN = "Invalid or expired token. Please log in again."


@lru_cache()
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, settings: Settings) -> str:
    return _pwd_context(settings.bcrypt_rounds).hash(password)


def verify_password(password: str, hashed: str, settings: Settings) -> bool:
    if not hashed:
        return False
    return _pwd_context(settings.bcrypt_rounds).verify(password, hashed)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


class AuthService:
    """Signup, login and bearer-token verification against the users collection."""

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings

    def _issue(self, user: Dict[str, Any]) -> Tuple[Dict[str, Any], str]:
        token = create_access_token({"sub": str(user["_id"])}, self.settings)
        return sanitize(user), token

    def signup(self, name: str, email: str, password: str) -> Tuple[Dict[str, Any], str]:
        name = (name or "").strip()
        if not name:
            raise BadRequestError("Name is required")
        email = email.strip().lower()
        if self.db[USERS].find_one({"email": email}):
            raise ConflictError("User already exists")
        user_doc = User(
            name=name,
            email=email,
            password=hash_password(password, self.settings),
        ).to_doc()
        try:
            res = self.db[USERS].insert_one(user_doc)
        except DuplicateKeyError:
            raise ConflictError("User already exists")
        user_doc["_id"] = res.inserted_id
        logger.info(f"User signed up: {res.inserted_id}")
        return self._issue(user_doc)

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[Dict[str, Any], str]:
        if not email or not password:
            raise BadRequestError("Please provide email and password")
        user = self.db[USERS].find_one({"email": email.strip().lower()})
        if not user or not verify_password(password, user.get("password", ""), self.settings):
            raise AuthFailureError(INVALID_CREDENTIALS)
        return self._issue(user)

    def verify_token(self, token: Optional[str]) -> Dict[str, Any]:
        if not token:
            logger.info("Rejected request without bearer token")
            raise AuthFailureError("You are not logged in. Please log in to get access.")
        try:
            payload = jwt.decode(token, self.settings.secret_key, algorithms=[self.settings.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise AuthFailureError(INVALID_TOKEN)
        except JWTError as exc:
            logger.warning(f"Rejected malformed token: {exc}")
            raise AuthFailureError(INVALID_TOKEN)

        user_id = parse_object_id(payload.get("sub"))
        if user_id is None:
            logger.warning("Rejected token without a valid subject")
            raise AuthFailureError(INVALID_TOKEN)
        user = self.db[USERS].find_one({"_id": user_id})
        if not user:
            logger.warning(f"Rejected token for missing user {user_id}")
            raise AuthFailureError("The user belonging to this token no longer exists.")
        return sanitize(user)


def get_auth_service(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings)
) -> AuthService:
    return AuthService(db, settings)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    return service.verify_token(token)

"""
Authentication utilities - JWT, password hashing and session dependencies
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional, Dict
import bcrypt
from jose import JWTError, jwt
from fastapi import HTTPException, Request, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from praisewall.config.settings import settings
from praisewall.database.db_operations import db_ops
from praisewall.config.database import Collections
from praisewall.services.session_events import SessionEventChannel

logger = logging.getLogger(__name__)

# JWT Bearer token
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

def hash_password(password: str) -> str:
    """Hash a password using bcrypt directly"""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash"""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        return False

def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token with a unique jti so it can be revoked on logout"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> Dict:
    """Decode and verify a JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning("JWT verification failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

async def is_token_revoked(jti: Optional[str]) -> bool:
    if not jti:
        return True
    return await db_ops.get_one(Collections.REVOKED_TOKENS, {"jti": jti}) is not None

async def resolve_session(token: str) -> Dict:
    """Turn a bearer token into the session context handed to handlers"""
    payload = decode_access_token(token)
    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )
    if await is_token_revoked(payload.get("jti")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has ended, please log in again",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict:
    """Get current authenticated account from JWT token"""
    return await resolve_session(credentials.credentials)

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[Dict]:
    """Session context when a valid token is sent, None otherwise"""
    if credentials is None:
        return None
    try:
        return await resolve_session(credentials.credentials)
    except HTTPException:
        return None

def get_session_events(request: Request) -> SessionEventChannel:
    return request.app.state.session_events

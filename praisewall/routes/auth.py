"""
Account routes - register, login, logout and current session
"""
from typing import Dict, Optional
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends, status
from praisewall.models.account import (
    AccountCreate, AccountLogin, AccountResponse, LoginResponse, SessionResponse
)
from praisewall.utils.auth import (
    hash_password, verify_password, create_access_token,
    get_current_user, get_optional_user, get_session_events,
)
from praisewall.services.session_events import SessionEvent, SessionEventChannel, SessionEventKind
from praisewall.database.db_operations import db_ops
from praisewall.config.database import Collections
from praisewall.utils.helpers import serialize_doc

router = APIRouter(prefix="/auth", tags=["Auth"])

def issue_token(account: Dict) -> str:
    return create_access_token(data={
        "sub": str(account["_id"]),
        "email": account["email"],
    })

@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: AccountCreate,
    events: SessionEventChannel = Depends(get_session_events),
):
    """Create an account and start a session for it"""
    email = payload.email.lower()
    if await db_ops.get_one(Collections.ACCOUNTS, {"email": email}):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists"
        )

    account = await db_ops.create(Collections.ACCOUNTS, {
        "email": email,
        "full_name": payload.full_name,
        "password": hash_password(payload.password),
        "is_active": True,
    })
    await events.publish(SessionEvent(SessionEventKind.REGISTERED, str(account["_id"]), email))
    return LoginResponse(access_token=issue_token(account), account=serialize_doc(account))

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: AccountLogin,
    events: SessionEventChannel = Depends(get_session_events),
):
    """Authenticate and return a JWT token"""
    account = await db_ops.get_one(Collections.ACCOUNTS, {"email": credentials.email.lower()})
    if not account or not verify_password(credentials.password, account["password"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )
    if not account.get("is_active", True):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated"
        )

    await events.publish(SessionEvent(SessionEventKind.LOGIN, str(account["_id"]), account["email"]))
    return LoginResponse(access_token=issue_token(account), account=serialize_doc(account))

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: dict = Depends(get_current_user),
    events: SessionEventChannel = Depends(get_session_events),
):
    """End the session by revoking its token"""
    await db_ops.create(Collections.REVOKED_TOKENS, {
        "jti": current_user["jti"],
        "user_id": current_user["sub"],
        "expires_at": datetime.utcfromtimestamp(current_user["exp"]),
    })
    await events.publish(SessionEvent(SessionEventKind.LOGOUT, current_user["sub"], current_user.get("email")))

@router.get("/session", response_model=SessionResponse)
async def current_session(current_user: Optional[dict] = Depends(get_optional_user)):
    """Current session's account, or {"user": null} without a valid token"""
    if current_user is None:
        return SessionResponse(user=None)
    account = await db_ops.get_by_id(Collections.ACCOUNTS, current_user["sub"])
    if not account:
        return SessionResponse(user=None)
    return SessionResponse(user=AccountResponse(**serialize_doc(account)))

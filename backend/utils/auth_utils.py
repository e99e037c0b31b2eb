import os
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import pytz
from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError
from sqlalchemy.orm import Session

from crud.users import ensure_user
from database import get_db
from models.users import User

load_dotenv()

# Tokens are issued by the identity provider and signed with a shared secret.
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")


def create_signed_token(claims: Dict[str, Any], expires_in: timedelta, audience: Optional[str] = None) -> str:
    """Sign `claims` with the service secret, adding an expiry and optional audience."""
    to_encode = dict(claims)
    to_encode["exp"] = datetime.now(pytz.utc) + expires_in
    if audience:
        to_encode["aud"] = audience
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_signed_token(token: str, audience: Optional[str] = None) -> Dict[str, Any]:
    """
    Validate a token and return its claims.

    Raises HTTPException(401) for expired, malformed or mis-addressed tokens.
    """
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], audience=audience)
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTClaimsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {e}"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency to validate the bearer token from the Authorization header.

    Usage:
        @router.get("/secure-data")
        def secure_endpoint(user: dict = Depends(get_current_user)):
            return {"sub": user["sub"]}
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
        )

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    payload = decode_signed_token(parts[1])
    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token does not identify a user",
        )
    return payload


def get_user_identifier(user: Dict[str, Any]) -> str:
    return str(user["sub"])


def get_current_db_user(
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the token's subject to a `User` row, provisioning it on first sight."""
    return ensure_user(db, user)

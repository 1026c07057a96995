"""Firebase Authentication dependencies.

Every endpoint scopes its data to the local user resolved here.
"""

import logging
import os
from functools import lru_cache
from typing import Optional
from uuid import UUID

import firebase_admin
from fastapi import Depends, HTTPException, Request, status
from firebase_admin import auth, credentials, exceptions
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models import UserDB

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def initialize_firebase() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once per process.

    Uses the service account file from FIREBASE_SERVICE_ACCOUNT_KEY_PATH when
    present, Application Default Credentials otherwise.

    Raises:
        ValueError: If FIREBASE_PROJECT_ID is not set
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass  # Not initialized yet

    project_id = os.environ.get("FIREBASE_PROJECT_ID")
    if not project_id:
        raise ValueError("FIREBASE_PROJECT_ID environment variable is required")

    service_account_path = os.environ.get("FIREBASE_SERVICE_ACCOUNT_KEY_PATH")
    if service_account_path and os.path.exists(service_account_path):
        return firebase_admin.initialize_app(
            credentials.Certificate(service_account_path)
        )
    return firebase_admin.initialize_app(
        credentials.ApplicationDefault(), {"projectId": project_id}
    )


def get_firebase_auth():
    """Firebase auth module, with the SDK initialized."""
    initialize_firebase()
    return auth


class FirebaseUser(BaseModel):
    """Claims of a verified Firebase ID token."""

    uid: str
    email: Optional[str] = None
    email_verified: bool = False
    claims: dict = {}


class AuthenticatedUser(BaseModel):
    """Firebase identity plus the local user row it maps to."""

    firebase_uid: str
    user_id: UUID
    email: str


def extract_token_from_request(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, or None."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[len("Bearer ") :]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_firebase_token(
    request: Request,
    auth_instance=Depends(get_firebase_auth),
) -> FirebaseUser:
    """Verify the request's Firebase ID token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    token = extract_token_from_request(request)
    if not token:
        raise _unauthorized("Missing authentication token")

    try:
        decoded_token = auth_instance.verify_id_token(token)
    except auth.ExpiredIdTokenError as err:
        raise _unauthorized("Authentication token has expired") from err
    except auth.InvalidIdTokenError as err:
        raise _unauthorized("Invalid authentication token") from err
    except (ValueError, exceptions.FirebaseError) as err:
        logger.warning("Firebase token verification failed: %s", err)
        raise _unauthorized(f"Authentication failed: {err}") from err

    return FirebaseUser(
        uid=decoded_token["uid"],
        email=decoded_token.get("email"),
        email_verified=decoded_token.get("email_verified", False),
        claims=decoded_token,
    )


async def get_or_create_user(
    firebase_user: FirebaseUser = Depends(verify_firebase_token),
    db: Session = Depends(get_db),
) -> AuthenticatedUser:
    """Resolve the local user for a verified token, creating it on first login.

    Raises:
        HTTPException: 401 if the token carries no email
        HTTPException: 500 if the user row cannot be created
    """
    if not firebase_user.email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User email is required",
        )

    user = db.query(UserDB).filter(UserDB.firebase_uid == firebase_user.uid).first()

    if not user:
        try:
            user = UserDB(firebase_uid=firebase_user.uid, email=firebase_user.email)
            db.add(user)
            db.commit()
            db.refresh(user)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to create user for uid %s", firebase_user.uid)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to create user: {str(e)}",
            ) from e
        logger.info("Created user %s on first login", user.id)

    return AuthenticatedUser(
        firebase_uid=firebase_user.uid,
        user_id=user.id,
        email=user.email,
    )

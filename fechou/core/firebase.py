# fechou/core/firebase.py

import firebase_admin
from firebase_admin import auth as firebase_auth, credentials
from fastapi import HTTPException, status

from fechou.core.config import FIREBASE_CREDENTIALS
from fechou.utils.logger import get_logger

logger = get_logger("auth.firebase")

_app = None


def _get_app():
    global _app
    if _app is None:
        cred = credentials.Certificate(FIREBASE_CREDENTIALS)
        _app = firebase_admin.initialize_app(cred)
        logger.info("Firebase admin initialized")
    return _app


def verify_firebase_token(token: str) -> dict:
    """Verify a Firebase ID token and return its decoded claims."""
    try:
        return firebase_auth.verify_id_token(token, app=_get_app())
    except firebase_auth.ExpiredIdTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
        )
    except (firebase_auth.InvalidIdTokenError, ValueError):
        logger.warning("Firebase token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

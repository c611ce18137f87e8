"""Centralized dependency type aliases for FastAPI routes.

Import all dependencies from this single module:
    from atlas_auth.core.deps import SessionDep, SettingsDep, FirebaseAuthDep
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from atlas_auth.auth.provider import (
    FirebaseAuthServiceProtocol,
    get_firebase_auth_service,
)
from atlas_auth.core.settings import Settings, get_settings
from atlas_auth.db.engine import get_session

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Google sign-in token verification
FirebaseAuthDep = Annotated[
    FirebaseAuthServiceProtocol, Depends(get_firebase_auth_service)
]

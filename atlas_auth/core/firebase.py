import logging

from firebase_admin import get_app, initialize_app

from atlas_auth.core.settings import Settings

logger = logging.getLogger(__name__)


def init_firebase(settings: Settings) -> None:
    """Initialize Firebase Admin SDK (idempotent).

    Uses GOOGLE_APPLICATION_CREDENTIALS environment variable for credentials.
    ID token verification only needs the project id, which is taken from
    FIREBASE_PROJECT_ID when set.
    """
    try:
        get_app()
    except ValueError:
        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        initialize_app(options=options)
        logger.info("Firebase Admin initialized")

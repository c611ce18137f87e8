"""Auth domain router.

Registration, password reset and sign-in routes. Handlers stay thin:
they validate the request, call a service and translate its result into
a response or an ``AppException``.
"""

import logging

from fastapi import APIRouter, Request, status
from sqlalchemy.exc import SQLAlchemyError

from atlas_auth.auth.exceptions import (
    InvalidCredentialsError,
    PasswordNotSetError,
    ProviderAccessDeniedError,
)
from atlas_auth.auth.linking import find_or_create_from_provider
from atlas_auth.auth.messages import (
    EMAIL_MESSAGE,
    REGISTRATION_MESSAGE,
    RESET_PASSWORD_MESSAGE,
    SESSION_MESSAGE,
)
from atlas_auth.auth.reset import initiate_reset, reset_password, validate_reset
from atlas_auth.auth.schemas import (
    CredentialsSignInRequest,
    ForgotPasswordRequest,
    GoogleSignInRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    SessionResponse,
    SignInResponse,
)
from atlas_auth.auth.service import (
    AuthenticatedIdentity,
    register_new_user,
    validate_registration,
    verify_credentials,
)
from atlas_auth.auth.session import (
    refresh_session_user,
    safe_callback_url,
    sign_in,
    sign_out,
)
from atlas_auth.auth.validation import is_valid_email, normalize_email
from atlas_auth.core.constants import CommonResponses, Routes
from atlas_auth.core.deps import FirebaseAuthDep, SessionDep, SettingsDep
from atlas_auth.core.email import send_password_reset_email
from atlas_auth.core.exceptions import AppException, BadRequestError, ConflictError
from atlas_auth.user.exceptions import EmailExistsError, UsernameExistsError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.AUTH.prefix,
    tags=[Routes.AUTH.tag],
    responses={**CommonResponses.BAD_REQUEST},
)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.CONFLICT},
)
async def register(register_data: RegisterRequest, session: SessionDep):
    """Register a new password account.

    Every field is checked before storage is touched; a taken username or
    email is reported as 409 with the offending ``field``.
    """
    validate_registration(register_data)

    result = register_new_user(
        session,
        username=register_data.username or "",
        password=register_data.password or "",
        name=register_data.name or "",
        email=register_data.email or "",
    )

    if result.identity is None:
        if result.field == "username":
            raise UsernameExistsError()
        if result.field == "email":
            raise EmailExistsError()
        raise ConflictError(result.error or REGISTRATION_MESSAGE.FAILURE, field=result.field)

    return RegisterResponse(
        message=REGISTRATION_MESSAGE.USER_SUCCESS,
        user=result.identity.to_read(),
    )


@router.post("/forgot_password", response_model=MessageResponse)
async def forgot_password(
    request_data: ForgotPasswordRequest,
    session: SessionDep,
    settings: SettingsDep,
):
    """Email a reset link.

    The response never reveals whether the email is registered, except for
    accounts created through Google sign-in, which have no password.
    """
    email = normalize_email(request_data.email or "")
    if not email:
        raise BadRequestError(EMAIL_MESSAGE.REQUIRED)
    if not is_valid_email(email):
        raise BadRequestError(EMAIL_MESSAGE.INVALID_FORMAT)

    result = initiate_reset(
        session,
        email,
        send_email=send_password_reset_email,
        ttl=settings.reset_token_ttl,
    )
    if not result.ok:
        raise PasswordNotSetError(result.message)

    return MessageResponse(message=result.message)


@router.post("/reset_password", response_model=MessageResponse)
async def reset_password_route(request_data: ResetPasswordRequest, session: SessionDep):
    """Set a new password with a token from the reset email."""
    validate_reset(request_data.token, request_data.password)

    reset_password(session, request_data.token or "", request_data.password or "")

    return MessageResponse(message=RESET_PASSWORD_MESSAGE.COMPLETED)


@router.post(
    "/callback/credentials",
    response_model=SignInResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def sign_in_with_credentials(
    request: Request,
    credentials: CredentialsSignInRequest,
    session: SessionDep,
    settings: SettingsDep,
):
    """Sign in with username or email plus password and start a session."""
    identity = verify_credentials(
        session,
        email=credentials.email,
        username=credentials.username,
        password=credentials.password,
    )
    if identity is None:
        raise InvalidCredentialsError()

    sign_in(request, identity)
    return SignInResponse(
        url=safe_callback_url(credentials.callback_url, settings.auth_landing_path),
        user=identity.to_read(),
    )


@router.post(
    "/callback/google",
    response_model=SignInResponse,
    responses={**CommonResponses.UNAUTHORIZED, **CommonResponses.FORBIDDEN},
)
async def sign_in_with_google(
    request: Request,
    sign_in_data: GoogleSignInRequest,
    session: SessionDep,
    settings: SettingsDep,
    firebase_auth: FirebaseAuthDep,
):
    """Sign in with a Google ID token, creating the account on first use.

    Verification failures answer 401 with a provider error ``code``;
    a verified identity that cannot be linked answers 403 AccessDenied.
    """
    provider_identity = firebase_auth.verify_id_token(sign_in_data.id_token)

    try:
        user = find_or_create_from_provider(
            session,
            email=provider_identity.email,
            name=provider_identity.name,
            external_id=provider_identity.external_id,
        )
    except (AppException, SQLAlchemyError) as e:
        logger.exception(
            "Could not link Google account", extra={"error_type": type(e).__name__}
        )
        raise ProviderAccessDeniedError() from e

    identity = AuthenticatedIdentity.from_user(user)
    sign_in(request, identity)
    return SignInResponse(
        url=safe_callback_url(sign_in_data.callback_url, settings.auth_landing_path),
        user=identity.to_read(),
    )


@router.get("/session", responses={200: {"model": SessionResponse}})
async def get_session_user(request: Request, session: SessionDep) -> dict:
    """Current session user, refreshed from storage. Empty when signed out."""
    user = refresh_session_user(request, session)
    if user is None:
        return {}
    return SessionResponse(user=user).model_dump(mode="json")


@router.post("/signout", response_model=MessageResponse)
async def signout(request: Request):
    sign_out(request)
    return MessageResponse(message=SESSION_MESSAGE.SIGNED_OUT)

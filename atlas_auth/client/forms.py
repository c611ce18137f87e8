"""Auth form components.

Each form owns its field values, validates them before any network call,
talks to the REST endpoints through ``AuthApiClient`` and reports every
terminal outcome through ``on_notify(severity, message)``. Navigation and
mode switches are injected as callbacks so a form can be driven by the
auth page controller or by a test.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

import anyio
import httpx

from atlas_auth.auth.messages import (
    EMAIL_MESSAGE,
    FORGOT_PASSWORD_MESSAGE,
    GOOGLE_MESSAGE,
    LOGIN_MESSAGE,
    NAME_MESSAGE,
    PASSWORD_MESSAGE,
    REGISTRATION_MESSAGE,
    RESET_PASSWORD_MESSAGE,
    USERNAME_MESSAGE,
    ProviderErrorCode,
    map_provider_error,
)
from atlas_auth.auth.mode import AuthMode, AuthPage, Severity
from atlas_auth.auth.validation import (
    is_valid_email,
    is_valid_name,
    is_valid_password,
    is_valid_username,
    normalize_email,
)
from atlas_auth.client.api import AuthApiClient

logger = logging.getLogger(__name__)

SUCCESS_DELAY_SECONDS = 1.0
LANDING_PATH = "/"

Notify = Callable[[str, str], None]
Callback = Callable[[], object]
Navigate = Callable[[str], None]
Sleep = Callable[[float], Awaitable[None]]
GoogleTokenProvider = Callable[[], Awaitable[str]]


class ProviderTokenError(Exception):
    """Raised by a Google token provider when the popup flow fails.

    ``code`` is one of ``ProviderErrorCode``.
    """

    def __init__(self, code: str = ProviderErrorCode.OAUTH_CALLBACK):
        self.code = code
        super().__init__(code)


class AuthForm(ABC):
    """Shared state: loading flags, field errors and notifications."""

    def __init__(
        self,
        api: AuthApiClient,
        *,
        on_notify: Notify | None = None,
        sleep: Sleep = anyio.sleep,
        success_delay: float = SUCCESS_DELAY_SECONDS,
    ):
        self.api = api
        self.on_notify = on_notify
        self.sleep = sleep
        self.success_delay = success_delay
        self.loading = False
        self.errors: dict[str, str] = {}

    @property
    def is_submitting(self) -> bool:
        return self.loading

    @property
    def disabled(self) -> bool:
        """Every input and button is disabled while a request is in flight."""
        return self.is_submitting

    def notify(self, severity: Severity, message: str) -> None:
        if self.on_notify is not None:
            self.on_notify(severity.value, message)

    def set_field_error(self, field: str, message: str) -> None:
        self.errors[field] = message

    @abstractmethod
    def validate(self) -> dict[str, str]:
        """Field name to error message for every invalid field."""

    def _check(self) -> bool:
        self.errors = self.validate()
        return not self.errors


class GoogleSignInForm(AuthForm):
    """Form that also offers "continue with Google"."""

    google_failure_message = GOOGLE_MESSAGE.SIGN_IN_FAILURE
    google_success_message = GOOGLE_MESSAGE.SIGN_IN_SUCCESS

    def __init__(
        self,
        api: AuthApiClient,
        *,
        token_provider: GoogleTokenProvider | None = None,
        navigate: Navigate | None = None,
        landing_path: str = LANDING_PATH,
        **kwargs,
    ):
        super().__init__(api, **kwargs)
        self.token_provider = token_provider
        self.navigate = navigate
        self.landing_path = landing_path
        self.google_loading = False

    @property
    def is_submitting(self) -> bool:
        return self.loading or self.google_loading

    def _go(self, url: str | None) -> None:
        if self.navigate is not None:
            self.navigate(url or self.landing_path)

    async def sign_in_with_google(self) -> bool:
        """Run the Google popup flow and exchange its ID token for a session."""
        if self.is_submitting or self.token_provider is None:
            return False

        self.google_loading = True
        try:
            id_token = await self.token_provider()
            result = await self.api.sign_in_with_google(
                id_token, callback_url=self.landing_path
            )
        except ProviderTokenError as e:
            self.notify(Severity.ERROR, map_provider_error(e.code))
            return False
        except httpx.HTTPError:
            logger.warning("Google sign-in request failed", exc_info=True)
            self.notify(Severity.ERROR, self.google_failure_message)
            return False
        finally:
            self.google_loading = False

        if not result.ok:
            self.notify(Severity.ERROR, map_provider_error(result.data.get("code")))
            return False

        self.notify(Severity.SUCCESS, self.google_success_message)
        self._go(result.data.get("url"))
        return True


class LoginForm(GoogleSignInForm):
    def __init__(
        self,
        api: AuthApiClient,
        *,
        on_success: Callback | None = None,
        on_register: Callback | None = None,
        on_forgot_password: Callback | None = None,
        **kwargs,
    ):
        super().__init__(api, **kwargs)
        self.on_success = on_success
        self.on_register = on_register
        self.on_forgot_password = on_forgot_password
        self.identifier = ""
        self.password = ""

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}

        identifier = self.identifier.strip()
        if not identifier:
            errors["identifier"] = LOGIN_MESSAGE.USERNAME_OR_EMAIL_REQUIRED
        elif "@" in identifier:
            if not is_valid_email(identifier):
                errors["identifier"] = EMAIL_MESSAGE.INVALID_FORMAT
        elif not is_valid_username(identifier):
            errors["identifier"] = USERNAME_MESSAGE.MIN_LENGTH

        if not is_valid_password(self.password):
            errors["password"] = PASSWORD_MESSAGE.MIN_LENGTH

        return errors

    async def submit(self) -> bool:
        if self.is_submitting or not self._check():
            return False

        identifier = self.identifier.strip()
        is_email = is_valid_email(identifier)

        self.loading = True
        try:
            result = await self.api.sign_in_with_credentials(
                password=self.password,
                email=identifier if is_email else None,
                username=None if is_email else identifier,
                callback_url=self.landing_path,
            )
        except httpx.HTTPError:
            logger.warning("Sign-in request failed", exc_info=True)
            self.notify(Severity.ERROR, LOGIN_MESSAGE.FAILURE)
            return False
        finally:
            self.loading = False

        if not result.ok:
            message = (
                LOGIN_MESSAGE.INVALID_CREDENTIALS
                if result.status_code == 401
                else LOGIN_MESSAGE.FAILURE
            )
            self.notify(Severity.ERROR, message)
            return False

        self.notify(Severity.SUCCESS, LOGIN_MESSAGE.SUCCESS)
        await self.sleep(self.success_delay)
        if self.on_success is not None:
            self.on_success()
        self._go(result.data.get("url"))
        return True

    def register(self) -> None:
        if self.on_register is not None and not self.is_submitting:
            self.on_register()

    def forgot_password(self) -> None:
        if self.on_forgot_password is not None and not self.is_submitting:
            self.on_forgot_password()


class RegisterForm(GoogleSignInForm):
    google_failure_message = GOOGLE_MESSAGE.SIGN_UP_FAILURE
    google_success_message = GOOGLE_MESSAGE.SIGN_UP_SUCCESS

    def __init__(
        self,
        api: AuthApiClient,
        *,
        on_success: Callback | None = None,
        on_login: Callback | None = None,
        **kwargs,
    ):
        super().__init__(api, **kwargs)
        self.on_success = on_success
        self.on_login = on_login
        self.reset()

    def reset(self) -> None:
        self.name = ""
        self.username = ""
        self.email = ""
        self.password = ""

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not is_valid_name(self.name):
            errors["name"] = NAME_MESSAGE.REQUIRED
        if not is_valid_username(self.username):
            errors["username"] = USERNAME_MESSAGE.MIN_LENGTH
        if not self.email.strip():
            errors["email"] = EMAIL_MESSAGE.REQUIRED
        elif not is_valid_email(self.email):
            errors["email"] = EMAIL_MESSAGE.INVALID_FORMAT
        if not is_valid_password(self.password):
            errors["password"] = PASSWORD_MESSAGE.MIN_LENGTH
        return errors

    async def submit(self) -> bool:
        if self.is_submitting or not self._check():
            return False

        self.loading = True
        try:
            result = await self.api.register(
                username=self.username,
                password=self.password,
                name=self.name,
                email=normalize_email(self.email),
            )
        except httpx.HTTPError:
            logger.warning("Registration request failed", exc_info=True)
            self.notify(Severity.ERROR, REGISTRATION_MESSAGE.FAILURE)
            return False
        finally:
            self.loading = False

        if not result.ok:
            message = result.error or REGISTRATION_MESSAGE.FAILURE
            field = result.data.get("field")
            if result.status_code == 409 and field:
                self.set_field_error(field, message)
            self.notify(Severity.ERROR, message)
            return False

        self.notify(Severity.SUCCESS, REGISTRATION_MESSAGE.SUCCESS)
        self.reset()
        await self.sleep(self.success_delay)
        if self.on_success is not None:
            self.on_success()
        return True

    def login(self) -> None:
        if self.on_login is not None and not self.is_submitting:
            self.on_login()


class ForgotPasswordForm(AuthForm):
    def __init__(self, api: AuthApiClient, *, on_back: Callback | None = None, **kwargs):
        super().__init__(api, **kwargs)
        self.on_back = on_back
        self.email = ""

    def validate(self) -> dict[str, str]:
        if not normalize_email(self.email):
            return {"email": FORGOT_PASSWORD_MESSAGE.EMAIL_REQUIRED}
        if not is_valid_email(self.email):
            return {"email": EMAIL_MESSAGE.INVALID_FORMAT}
        return {}

    async def submit(self) -> bool:
        if self.is_submitting:
            return False
        if not self._check():
            self.notify(Severity.ERROR, self.errors["email"])
            return False

        self.loading = True
        try:
            result = await self.api.forgot_password(normalize_email(self.email))
        except httpx.HTTPError:
            logger.warning("Forgot password request failed", exc_info=True)
            self.notify(Severity.ERROR, FORGOT_PASSWORD_MESSAGE.FAILURE_LATER)
            return False
        finally:
            self.loading = False

        if not result.ok:
            self.notify(Severity.ERROR, result.error or FORGOT_PASSWORD_MESSAGE.FAILURE)
            return False

        self.notify(Severity.SUCCESS, result.message or FORGOT_PASSWORD_MESSAGE.SUCCESS)
        self.email = ""
        return True

    def back(self) -> None:
        if self.on_back is not None and not self.is_submitting:
            self.on_back()


class ResetPasswordForm(AuthForm):
    def __init__(
        self,
        api: AuthApiClient,
        *,
        token: str | None,
        on_finish: Callback | None = None,
        **kwargs,
    ):
        super().__init__(api, **kwargs)
        self.token = token
        self.on_finish = on_finish
        self.reset()

    def reset(self) -> None:
        self.password = ""
        self.confirm_password = ""

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not is_valid_password(self.password):
            errors["password"] = PASSWORD_MESSAGE.MIN_LENGTH
        if self.confirm_password != self.password:
            errors["confirm_password"] = PASSWORD_MESSAGE.DO_NOT_MATCH
        return errors

    async def submit(self) -> bool:
        if self.is_submitting or not self._check():
            return False
        if not self.token:
            self.notify(Severity.ERROR, RESET_PASSWORD_MESSAGE.INVALID_TOKEN)
            return False

        self.loading = True
        try:
            result = await self.api.reset_password(self.token, self.password)
        except httpx.HTTPError:
            logger.warning("Reset password request failed", exc_info=True)
            self.notify(Severity.ERROR, RESET_PASSWORD_MESSAGE.FAILURE_LATER)
            return False
        finally:
            self.loading = False

        if not result.ok:
            self.notify(Severity.ERROR, result.error or RESET_PASSWORD_MESSAGE.FAILURE)
            return False

        self.notify(Severity.SUCCESS, RESET_PASSWORD_MESSAGE.SUCCESS)
        self.reset()
        await self.sleep(self.success_delay)
        if self.on_finish is not None:
            self.on_finish()
        return True


GOOGLE_FORM_OPTIONS = ("token_provider", "navigate", "landing_path")


def form_for_page(page: AuthPage, api: AuthApiClient, **options) -> AuthForm:
    """Build the form for the page's current mode, wired to the page.

    Mode switches go through the page's navigation helpers and
    notifications land on the page. ``options`` are passed to the form:
    ``sleep`` and ``success_delay`` to every form, ``token_provider``,
    ``navigate`` and ``landing_path`` only to forms with Google sign-in.
    """
    mode = page.mode or page.load()
    google_options = {
        key: options.pop(key) for key in GOOGLE_FORM_OPTIONS if key in options
    }
    options.setdefault("on_notify", page.notify)

    if mode is AuthMode.REGISTER:
        return RegisterForm(
            api,
            on_success=page.show_login,
            on_login=page.show_login,
            **google_options,
            **options,
        )
    if mode is AuthMode.FORGOT_PASSWORD:
        return ForgotPasswordForm(api, on_back=page.show_login, **options)
    if mode is AuthMode.RESET_PASSWORD:
        return ResetPasswordForm(
            api, token=page.reset_token, on_finish=page.show_login, **options
        )
    return LoginForm(
        api,
        on_register=page.show_register,
        on_forgot_password=page.show_forgot_password,
        **google_options,
        **options,
    )

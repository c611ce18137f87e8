"""Auth page mode resolution.

The auth page shows one of four forms. Which one is decided from the
``mode`` and ``reset_token`` query parameters, which come straight from
the address bar and therefore cannot be trusted. ``resolve_mode`` turns any
query into a mode plus, when the query is not already canonical, the query
the URL should be rewritten to. ``AuthPage`` applies those rewrites with
history replacement until the URL is stable.

Malformed input never raises; every dead end falls back to ``login``.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import parse_qsl, urlencode

from atlas_auth.auth.messages import map_provider_error

logger = logging.getLogger(__name__)

MODE_PARAM = "mode"
RESET_TOKEN_PARAM = "reset_token"
ERROR_PARAM = "error"
CALLBACK_URL_PARAM = "callbackUrl"

RECOGNIZED_PARAMS = frozenset({MODE_PARAM, RESET_TOKEN_PARAM})
TRANSIENT_PARAMS = frozenset({ERROR_PARAM, CALLBACK_URL_PARAM})

MAX_REWRITES = 5

QueryPairs = list[tuple[str, str]]


class AuthMode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    FORGOT_PASSWORD = "forgotPassword"
    RESET_PASSWORD = "resetPassword"

    @classmethod
    def parse(cls, value: str | None) -> "AuthMode | None":
        try:
            return cls(value)
        except ValueError:
            return None


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    severity: Severity
    message: str


@dataclass(frozen=True)
class ModeResolution:
    """Result of resolving a query.

    ``mode`` is None when the query has to be rewritten before a mode can
    be chosen. ``query`` is the rewritten query string, or None when the
    URL is already canonical.
    """

    mode: AuthMode | None
    query: str | None = None

    @property
    def needs_rewrite(self) -> bool:
        return self.query is not None


def parse_query(query: str | Sequence[tuple[str, str]]) -> QueryPairs:
    if isinstance(query, str):
        return parse_qsl(query.lstrip("?"), keep_blank_values=True)
    return list(query)


def encode_query(pairs: QueryPairs) -> str:
    return urlencode(pairs)


def _first(pairs: QueryPairs, key: str) -> str | None:
    return next((value for k, value in pairs if k == key), None)


def _reset_token(pairs: QueryPairs) -> str | None:
    """First reset token, trimmed. Blank tokens count as absent."""
    token = (_first(pairs, RESET_TOKEN_PARAM) or "").strip()
    return token or None


def _canonical(mode: AuthMode, token: str | None = None) -> str:
    pairs: QueryPairs = [(MODE_PARAM, mode.value)]
    if token is not None:
        pairs.append((RESET_TOKEN_PARAM, token))
    return encode_query(pairs)


def _resolve_single(raw_mode: str | None, token: str | None) -> ModeResolution:
    mode = AuthMode.parse(raw_mode)
    if mode is None:
        return ModeResolution(AuthMode.LOGIN, _canonical(AuthMode.LOGIN))
    if mode is AuthMode.RESET_PASSWORD and token is None:
        return ModeResolution(AuthMode.LOGIN, _canonical(AuthMode.LOGIN))
    if token is not None and mode is not AuthMode.RESET_PASSWORD:
        return ModeResolution(mode, _canonical(mode))
    return ModeResolution(mode)


def resolve_mode(query: str | Sequence[tuple[str, str]]) -> ModeResolution:
    """Resolve the display mode for a query.

    OAuth callback parameters (``error``, ``callbackUrl``) are ignored here;
    ``AuthPage`` surfaces and strips them. Rules, first match wins:

    1. unknown parameters: drop them, keeping the first mode and the
       trimmed reset token, and resolve again after the rewrite
    2. several modes: ``resetPassword`` wins if any occurrence asks for it
       and a token is present, else the first valid one (or ``login``);
       the collapsed query then goes through the remaining rules
    3. missing or unknown mode: ``login``
    4. ``resetPassword`` without a token: ``login``
    5. a token with any other mode: keep the mode, drop the token
    6. anything else is already canonical
    """
    pairs = [
        (key, value)
        for key, value in parse_query(query)
        if key not in TRANSIENT_PARAMS
    ]
    token = _reset_token(pairs)

    if any(key not in RECOGNIZED_PARAMS for key, _ in pairs):
        kept: QueryPairs = []
        first_mode = _first(pairs, MODE_PARAM)
        if first_mode is not None:
            kept.append((MODE_PARAM, first_mode))
        if token is not None:
            kept.append((RESET_TOKEN_PARAM, token))
        return ModeResolution(None, encode_query(kept))

    modes = [value for key, value in pairs if key == MODE_PARAM]
    if len(modes) > 1:
        if AuthMode.RESET_PASSWORD.value in modes and token is not None:
            collapsed = AuthMode.RESET_PASSWORD
        else:
            collapsed = next(
                (m for m in map(AuthMode.parse, modes) if m is not None),
                AuthMode.LOGIN,
            )
        resolution = _resolve_single(collapsed.value, token)
        if resolution.needs_rewrite:
            return resolution
        return ModeResolution(resolution.mode, _canonical(collapsed, token))

    return _resolve_single(modes[0] if modes else None, token)


@dataclass
class Location:
    path: str = "/auth"
    query: str = ""

    @property
    def url(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path


@dataclass
class AuthPage:
    """Auth page controller.

    Holds the current location, a history stack, the resolved mode and the
    visible notification. URL changes made by the page always replace the
    current history entry.
    """

    location: Location = field(default_factory=Location)
    history: list[str] = field(default_factory=list)
    mode: AuthMode | None = None
    notification: Notification | None = None
    rewrites: int = 0

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.location.url)

    @classmethod
    def from_url(cls, path: str, query: str = "") -> "AuthPage":
        return cls(location=Location(path=path, query=query.lstrip("?")))

    @property
    def url(self) -> str:
        return self.location.url

    def load(self) -> AuthMode:
        """Evaluate the URL, applying rewrites until it is stable."""
        for _ in range(MAX_REWRITES):
            if not self._evaluate():
                break
        else:
            logger.warning("Auth URL did not settle", extra={"query": self.location.query})

        if self.mode is None:
            self._set_mode(AuthMode.LOGIN)
        return self.mode

    def replace(self, query: str | QueryPairs) -> AuthMode:
        """Replace the current history entry with ``query`` and re-evaluate."""
        self._replace_location(query)
        return self.load()

    def set_url_mode(self, mode: AuthMode, remove_reset_token: bool = False) -> AuthMode:
        pairs = [
            (key, value)
            for key, value in parse_query(self.location.query)
            if key != MODE_PARAM and not (remove_reset_token and key == RESET_TOKEN_PARAM)
        ]
        return self.replace([(MODE_PARAM, mode.value), *pairs])

    def show_login(self) -> AuthMode:
        return self.set_url_mode(AuthMode.LOGIN, remove_reset_token=True)

    def show_register(self) -> AuthMode:
        return self.set_url_mode(AuthMode.REGISTER)

    def show_forgot_password(self) -> AuthMode:
        return self.set_url_mode(AuthMode.FORGOT_PASSWORD)

    def notify(self, severity: Severity | str, message: str) -> None:
        self.notification = Notification(Severity(severity), message)

    def clear_notification(self) -> None:
        self.notification = None

    @property
    def reset_token(self) -> str | None:
        return _reset_token(parse_query(self.location.query))

    def _set_mode(self, mode: AuthMode) -> None:
        if self.mode is not None and mode is not self.mode:
            self.clear_notification()
        self.mode = mode

    def _replace_location(self, query: str | QueryPairs) -> None:
        if not isinstance(query, str):
            query = encode_query(query)
        self.location = Location(path=self.location.path, query=query)
        self.history[-1] = self.location.url
        self.rewrites += 1

    def _evaluate(self) -> bool:
        """Resolve the current URL once. Returns True if it was rewritten."""
        pairs = parse_query(self.location.query)
        resolution = resolve_mode(pairs)

        if resolution.mode is not None:
            self._set_mode(resolution.mode)

        keys = {key for key, _ in pairs}
        if keys & TRANSIENT_PARAMS:
            error = _first(pairs, ERROR_PARAM)
            if error:
                self.notify(Severity.ERROR, map_provider_error(error))
            if resolution.needs_rewrite:
                self._replace_location(resolution.query or "")
            else:
                self._replace_location(
                    [(k, v) for k, v in pairs if k not in TRANSIENT_PARAMS]
                )
            return True

        if resolution.needs_rewrite:
            self._replace_location(resolution.query or "")
            return True
        return False

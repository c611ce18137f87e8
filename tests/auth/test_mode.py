"""Tests for auth page mode resolution and the page controller."""

from hypothesis import given
from hypothesis import strategies as st

from atlas_auth.auth.mode import (
    AuthMode,
    AuthPage,
    ModeResolution,
    Notification,
    Severity,
    resolve_mode,
)

# --- resolve_mode ---


def test_resolve_canonical_modes_without_rewrite():
    """Test each valid mode resolves to itself with no rewrite."""
    assert resolve_mode("mode=login") == ModeResolution(AuthMode.LOGIN)
    assert resolve_mode("mode=register") == ModeResolution(AuthMode.REGISTER)
    assert resolve_mode("mode=forgotPassword") == ModeResolution(
        AuthMode.FORGOT_PASSWORD
    )


def test_resolve_reset_password_with_token():
    """Test resetPassword with a token is kept as is."""
    resolution = resolve_mode("mode=resetPassword&reset_token=abc123")

    assert resolution.mode is AuthMode.RESET_PASSWORD
    assert resolution.query is None


def test_resolve_reset_password_without_token_falls_back_to_login():
    """Test resetPassword without a token resolves to login."""
    resolution = resolve_mode("mode=resetPassword")

    assert resolution.mode is AuthMode.LOGIN
    assert resolution.query == "mode=login"


def test_resolve_reset_password_with_blank_token_falls_back_to_login():
    """Test a whitespace-only token counts as absent."""
    resolution = resolve_mode("mode=resetPassword&reset_token=%20%20")

    assert resolution.mode is AuthMode.LOGIN
    assert resolution.query == "mode=login"


def test_resolve_missing_mode():
    """Test an empty query resolves to login and rewrites to mode=login."""
    assert resolve_mode("") == ModeResolution(AuthMode.LOGIN, "mode=login")


def test_resolve_unknown_mode_drops_token():
    """Test an unrecognized mode resolves to login without the token."""
    resolution = resolve_mode("mode=signup&reset_token=abc")

    assert resolution == ModeResolution(AuthMode.LOGIN, "mode=login")


def test_resolve_token_with_other_mode_is_dropped():
    """Test a token next to a non-reset mode is removed, the mode kept."""
    resolution = resolve_mode("mode=register&reset_token=abc")

    assert resolution == ModeResolution(AuthMode.REGISTER, "mode=register")


def test_resolve_unknown_params_are_stripped():
    """Test unknown keys trigger a rewrite with no mode decided yet."""
    resolution = resolve_mode("foo=bar&mode=register")

    assert resolution.mode is None
    assert resolution.query == "mode=register"


def test_resolve_unknown_params_keep_trimmed_token():
    """Test the rewrite keeps the first mode and the trimmed token."""
    resolution = resolve_mode("utm=x&mode=resetPassword&reset_token=%20abc%20")

    assert resolution.mode is None
    assert resolution.query == "mode=resetPassword&reset_token=abc"


def test_resolve_duplicate_modes_prefer_reset_with_token():
    """Test resetPassword wins among duplicates when a token is present."""
    resolution = resolve_mode("mode=login&mode=resetPassword&reset_token=abc")

    assert resolution.mode is AuthMode.RESET_PASSWORD
    assert resolution.query == "mode=resetPassword&reset_token=abc"


def test_resolve_duplicate_modes_without_token_take_first_valid():
    """Test duplicates collapse to the first valid mode."""
    resolution = resolve_mode("mode=bogus&mode=register&mode=login")

    assert resolution == ModeResolution(AuthMode.REGISTER, "mode=register")


def test_resolve_duplicate_modes_all_invalid():
    """Test duplicates with no valid mode collapse to login."""
    resolution = resolve_mode("mode=a&mode=b")

    assert resolution == ModeResolution(AuthMode.LOGIN, "mode=login")


def test_resolve_duplicate_modes_reset_without_token():
    """Test resetPassword among duplicates loses when there is no token."""
    resolution = resolve_mode("mode=resetPassword&mode=forgotPassword")

    assert resolution == ModeResolution(AuthMode.LOGIN, "mode=login")


def test_resolve_ignores_oauth_callback_params():
    """Test error and callbackUrl do not count as unknown keys."""
    resolution = resolve_mode("mode=register&error=AccessDenied&callbackUrl=%2F")

    assert resolution == ModeResolution(AuthMode.REGISTER)


def test_resolve_accepts_pairs():
    """Test resolve_mode also takes parsed (key, value) pairs."""
    resolution = resolve_mode([("mode", "forgotPassword")])

    assert resolution.mode is AuthMode.FORGOT_PASSWORD


# --- AuthPage ---


def test_page_load_reset_without_token():
    """Test ?mode=resetPassword shows login and replaces the URL."""
    page = AuthPage.from_url("/auth", "mode=resetPassword")

    assert page.load() is AuthMode.LOGIN
    assert page.url == "/auth?mode=login"
    assert page.history == ["/auth?mode=login"]


def test_page_load_reset_with_token():
    """Test ?mode=resetPassword&reset_token=abc123 shows the reset form."""
    page = AuthPage.from_url("/auth", "mode=resetPassword&reset_token=abc123")

    assert page.load() is AuthMode.RESET_PASSWORD
    assert page.reset_token == "abc123"
    assert page.rewrites == 0


def test_page_load_strips_unknown_params():
    """Test ?foo=bar&mode=register becomes ?mode=register."""
    page = AuthPage.from_url("/auth", "foo=bar&mode=register")

    assert page.load() is AuthMode.REGISTER
    assert page.url == "/auth?mode=register"


def test_page_load_surfaces_oauth_error():
    """Test error=AccessDenied becomes a notification and is stripped."""
    page = AuthPage.from_url("/auth", "mode=login&error=AccessDenied")

    page.load()

    assert page.mode is AuthMode.LOGIN
    assert page.notification == Notification(
        Severity.ERROR, "Access denied. Please grant permission to continue."
    )
    assert page.url == "/auth?mode=login"


def test_page_load_oauth_error_survives_mode_fallback():
    """Test the error notification survives the initial login fallback."""
    page = AuthPage.from_url("/auth", "error=OAuthCallback&callbackUrl=%2Ftrips")

    page.load()

    assert page.mode is AuthMode.LOGIN
    assert page.url == "/auth?mode=login"
    assert page.notification is not None
    assert page.notification.message == (
        "Google sign-in was cancelled or failed. Please try again."
    )


def test_page_load_callback_url_without_error():
    """Test callbackUrl alone is stripped without a notification."""
    page = AuthPage.from_url("/auth", "mode=register&callbackUrl=%2F")

    page.load()

    assert page.url == "/auth?mode=register"
    assert page.notification is None


def test_page_load_unknown_error_code_uses_fallback_message():
    """Test unknown provider codes map to the generic Google message."""
    page = AuthPage.from_url("/auth", "mode=login&error=Weird")

    page.load()

    assert page.notification is not None
    assert page.notification.message.startswith("Google sign-in failed.")


def test_page_replace_never_pushes_history():
    """Test rewrites overwrite the current history entry."""
    page = AuthPage.from_url("/auth", "foo=1")
    page.load()
    page.show_register()
    page.show_forgot_password()

    assert page.history == ["/auth?mode=forgotPassword"]


def test_page_mode_change_clears_notification():
    """Test switching forms clears the visible notification."""
    page = AuthPage.from_url("/auth", "mode=login")
    page.load()
    page.notify(Severity.SUCCESS, "Signed in successfully!")

    page.show_register()

    assert page.mode is AuthMode.REGISTER
    assert page.notification is None


def test_page_same_mode_keeps_notification():
    """Test re-evaluating without a mode change keeps the notification."""
    page = AuthPage.from_url("/auth", "mode=login")
    page.load()
    page.notify("error", "Invalid username/email or password. Please try again.")

    page.show_login()

    assert page.notification is not None


def test_page_show_login_drops_reset_token():
    """Test show_login removes the token from the URL."""
    page = AuthPage.from_url("/auth", "mode=resetPassword&reset_token=abc")
    page.load()

    page.show_login()

    assert page.url == "/auth?mode=login"
    assert page.reset_token is None


def test_page_clear_notification():
    """Test explicit dismissal."""
    page = AuthPage()
    page.notify(Severity.ERROR, "boom")

    page.clear_notification()

    assert page.notification is None


# --- Properties ---

query_keys = st.sampled_from(
    ["mode", "reset_token", "error", "callbackUrl", "foo", "utm_source"]
)
query_values = st.one_of(
    st.sampled_from([m.value for m in AuthMode]),
    st.sampled_from(["", "  ", "abc", "AccessDenied", "/"]),
    st.text(max_size=8),
)
queries = st.lists(st.tuples(query_keys, query_values), max_size=6)


@given(queries)
def test_page_always_settles_on_a_mode(pairs):
    """Test any query resolves to a mode within the rewrite bound."""
    page = AuthPage()
    mode = page.replace(pairs)

    assert isinstance(mode, AuthMode)
    assert resolve_mode(page.location.query).query is None


@given(queries)
def test_resolution_is_idempotent(pairs):
    """Test resolving a rewritten query never rewrites it again."""
    first = resolve_mode(pairs)
    if first.query is None:
        return

    second = resolve_mode(first.query)
    if second.query is not None:
        # Only the unknown-key rewrite takes a second step.
        assert first.mode is None
        assert resolve_mode(second.query).query is None

import logging
from urllib.parse import urlencode

import resend

from atlas_auth.core.constants import JinjaCompiledEmailTemplatesEnv
from atlas_auth.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _render_template(template_name: str, **context: str) -> str:
    """Render a pre-compiled email template.

    Templates are pre-compiled with CSS inlined and HTML minified.
    Run `make compile-emails` after modifying source templates.

    Args:
        template_name: Name of the template file
        **context: Template variables

    Returns:
        Rendered HTML
    """
    template = JinjaCompiledEmailTemplatesEnv.get_template(template_name)
    return template.render(**context)


def init_resend(settings: Settings | None = None) -> None:
    """Initialize Resend with API key if available."""
    settings = settings or get_settings()
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY is not set; emails will not be sent")
        return
    resend.api_key = settings.resend_api_key


def build_reset_url(client_url: str, token: str) -> str:
    """Link that opens the auth page in reset mode for ``token``."""
    query = urlencode({"mode": "resetPassword", "reset_token": token})
    return f"{client_url.rstrip('/')}/auth?{query}"


def send_password_reset_email(to_email: str, token: str) -> None:
    """Send password reset email via Resend.

    Args:
        to_email: Recipient email address
        token: Reset token to embed in the link

    Raises:
        resend.exceptions.ResendError: If Resend rejects the message
    """
    settings = get_settings()

    if not settings.resend_api_key:
        logger.warning("Skipping password reset email: RESEND_API_KEY is not set")
        return

    reset_url = build_reset_url(settings.client_url, token)
    html_content = _render_template("password-reset.html", reset_url=reset_url)

    resend.Emails.send(
        {
            "from": settings.email_from,
            "to": to_email,
            "subject": "Atlas - Reset Your Password",
            "html": html_content,
        }
    )
    logger.info("Password reset email sent")

"""Server-rendered auth page.

Resolves the display mode from the query string and renders the matching
form. When the URL had to be normalized the page replaces the browser's
current history entry instead of redirecting, so the back button never
returns to the malformed URL.
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from atlas_auth.auth.mode import AuthMode, AuthPage
from atlas_auth.core.constants import JinjaPageTemplatesEnv, Routes

router = APIRouter(prefix=Routes.PAGES.prefix, tags=[Routes.PAGES.tag])

FORM_TITLES = {
    AuthMode.LOGIN: "Sign in",
    AuthMode.REGISTER: "Create an account",
    AuthMode.FORGOT_PASSWORD: "Forgot your password?",
    AuthMode.RESET_PASSWORD: "Choose a new password",
}


def render_auth_page(page: AuthPage, *, replace_url: bool) -> str:
    template = JinjaPageTemplatesEnv.get_template("auth.html")
    return template.render(
        mode=page.mode.value if page.mode else AuthMode.LOGIN.value,
        title=FORM_TITLES.get(page.mode or AuthMode.LOGIN),
        notification=page.notification,
        reset_token=page.reset_token,
        replace_url=page.url if replace_url else None,
    )


@router.get("", response_class=HTMLResponse, include_in_schema=False)
async def auth_page(request: Request):
    page = AuthPage.from_url(request.url.path, request.url.query)
    page.load()
    return HTMLResponse(render_auth_page(page, replace_url=page.rewrites > 0))

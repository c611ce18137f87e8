"""
App-wide constants for route configuration and templates.

This module provides a single source of truth for route prefixes, tags,
common response definitions and the Jinja2 environments.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all endpoints."""

    AUTH = RouteConfig(prefix="/api/auth", tag="auth")
    PAGES = RouteConfig(prefix="/auth", tag="pages")
    HEALTH = RouteConfig(prefix="/health", tag="health")


# Common response definitions for reuse across routers
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int, dict[str, Any]] = {
        401: {"description": "Invalid credentials or provider token"}
    }
    FORBIDDEN: dict[int, dict[str, Any]] = {
        403: {"description": "Sign-in was refused"}
    }
    CONFLICT: dict[int, dict[str, Any]] = {
        409: {"description": "Username or email already exists"}
    }
    BAD_REQUEST: dict[int, dict[str, Any]] = {
        400: {"description": "Invalid request data"}
    }


TemplatesDir = Path(__file__).parent.parent / "templates"
EmailTemplatesDir = TemplatesDir / "emails"
CompiledEmailTemplatesDir = EmailTemplatesDir / "compiled"
PageTemplatesDir = TemplatesDir / "pages"

# Jinja2 environment for source email templates (used by compile script)
JinjaEmailTemplatesEnv = Environment(
    loader=FileSystemLoader(str(EmailTemplatesDir)),
    autoescape=select_autoescape(["html", "xml", "j2"]),
)

# Jinja2 environment for compiled email templates (used at runtime)
JinjaCompiledEmailTemplatesEnv = Environment(
    loader=FileSystemLoader(str(CompiledEmailTemplatesDir)),
    autoescape=select_autoescape(["html", "xml"]),
)

# Jinja2 environment for server-rendered pages
JinjaPageTemplatesEnv = Environment(
    loader=FileSystemLoader(str(PageTemplatesDir)),
    autoescape=select_autoescape(["html", "xml"]),
)

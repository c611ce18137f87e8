#!/usr/bin/env python3
"""Compile email templates by inlining CSS and minifying HTML.

Source templates live in atlas_auth/templates/emails/*.j2; the compiled
output is written to the compiled/ subdirectory, which is what the app
renders at runtime.

Run this script after modifying email templates:
    make compile-emails

Or directly:
    python scripts/compile_emails.py
"""

from pathlib import Path

import css_inline
import minify_html
from jinja2 import Environment

from atlas_auth.core.constants import (
    CompiledEmailTemplatesDir,
    EmailTemplatesDir,
    JinjaEmailTemplatesEnv,
)

# Template configuration: maps template names to their Jinja2 variables
TEMPLATES = {
    "password-reset.j2": ["reset_url"],
}

# URL-safe marker that preserves quotes during minification
MARKER_URL_PREFIX = "https://jinja-placeholder.local/var/"


def restore_placeholders(html_content: str, variables: list[str]) -> str:
    """Swap URL markers back to Jinja2 expressions.

    The minifier may drop the quotes around attribute values, so both the
    quoted and unquoted forms are handled.
    """
    for var in variables:
        marker = f"{MARKER_URL_PREFIX}{var}"
        jinja_var = f"{{{{ {var} }}}}"
        html_content = html_content.replace(f"={marker}>", f'="{jinja_var}">')
        html_content = html_content.replace(f"={marker} ", f'="{jinja_var}" ')
        html_content = html_content.replace(f'"{marker}"', f'"{jinja_var}"')
        html_content = html_content.replace(marker, jinja_var)
    return html_content


def compile_template(
    env: Environment,
    template_name: str,
    variables: list[str],
    output_dir: Path,
) -> Path:
    """Compile a single email template and return the output path."""
    context = {var: f"{MARKER_URL_PREFIX}{var}" for var in variables}

    html_content = env.get_template(template_name).render(**context)
    html_content = css_inline.inline(html_content)
    html_content = minify_html.minify(html_content, minify_css=True)
    html_content = restore_placeholders(html_content, variables)

    output_path = output_dir / (Path(template_name).stem + ".html")
    output_path.write_text(html_content, encoding="utf-8")
    return output_path


def main() -> None:
    """Compile all email templates."""
    CompiledEmailTemplatesDir.mkdir(exist_ok=True)

    print("Compiling email templates...")

    for template_name, variables in TEMPLATES.items():
        if not (EmailTemplatesDir / template_name).exists():
            print(f"  ✗ {template_name} (not found)")
            continue
        output_path = compile_template(
            JinjaEmailTemplatesEnv, template_name, variables, CompiledEmailTemplatesDir
        )
        print(f"  ✓ {template_name} -> {output_path.name}")

    print(f"\nCompiled templates saved to: {CompiledEmailTemplatesDir}")


if __name__ == "__main__":
    main()

from __future__ import annotations

from typing import Optional

from apply_license.core.expression.parse_expression import parse_expression
from apply_license.core.io.emit import plan_license_files
from apply_license.core.model import LicenseTemplate, ResolvedMetadata
from apply_license.core.templates.render import render_licenses


def generate_license_files(
    resolved: ResolvedMetadata,
    templates: dict[str, LicenseTemplate],
    *,
    year: Optional[int] = None,
) -> dict[str, str]:
    """Parse, look up and render; return file name -> contents without writing."""
    identifiers = parse_expression(resolved.expression)
    rendered = render_licenses(templates, identifiers, resolved.author, year=year)
    return plan_license_files(rendered)

from __future__ import annotations

import datetime as _dt
from typing import Optional

from apply_license.core.model import LicenseTemplate, RenderedLicense
from apply_license.core.templates.template_config import HOLDERS_MARKER, YEAR_MARKER, lookup


def current_year() -> int:
    return _dt.date.today().year


def render_license(template: LicenseTemplate, author: str, year: Optional[int] = None) -> RenderedLicense:
    """Substitute author and year into a template.

    Both markers are replaced literally wherever they occur; the author string
    is inserted verbatim.
    """
    if year is None:
        year = current_year()
    text = template.text.replace(YEAR_MARKER, f"{year:04d}").replace(HOLDERS_MARKER, author)
    return RenderedLicense(identifier=template.identifier, text=text)


def render_licenses(
    templates: dict[str, LicenseTemplate],
    identifiers: list[str],
    author: str,
    *,
    year: Optional[int] = None,
) -> list[RenderedLicense]:
    """Look up and render every identifier, in order.

    Fails on the first unknown identifier before anything is rendered.
    """
    selected = [lookup(templates, i) for i in identifiers]
    if year is None:
        year = current_year()
    return [render_license(t, author, year) for t in selected]

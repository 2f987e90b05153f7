from __future__ import annotations

import re
from typing import Optional, Sequence

from apply_license.core.errors import MissingAuthorError
from apply_license.core.log import get_logger
from apply_license.core.model import ProjectMetadata, ResolvedMetadata

log = get_logger(__name__)

DEFAULT_LICENSE = "MIT OR Apache-2.0"
AUTHOR_SEPARATOR = ", "

_GIT_STYLE_AUTHOR = re.compile(r"^(?P<name>.+?)\s*<(?P<email>[^<>]*)>\s*$")


def author_name(entry: str) -> str:
    """Reduce ``John Doe <jd@example.com>`` to ``John Doe``; other strings pass through."""
    entry = entry.strip()
    m = _GIT_STYLE_AUTHOR.match(entry)
    if m:
        return m.group("name").strip()
    return entry


def parse_author_names(authors: Sequence[str]) -> list[str]:
    names = [author_name(a) for a in authors if a and a.strip()]
    return [n for n in names if n]


def resolve_metadata(
    *,
    authors: Optional[Sequence[str]] = None,
    license_expr: Optional[str] = None,
    manifest: Optional[ProjectMetadata] = None,
) -> ResolvedMetadata:
    """Decide the copyright holder string and the license expression.

    Author: explicit values (joined with ", ") win, else the first manifest
    author. License: explicit value, else the manifest field, else
    DEFAULT_LICENSE.
    """
    flag_names = parse_author_names(authors or [])
    manifest_names = parse_author_names(manifest.authors) if manifest else []

    if flag_names:
        author, author_source = AUTHOR_SEPARATOR.join(flag_names), "flag"
    elif manifest_names:
        author, author_source = manifest_names[0], "manifest"
    else:
        hint = "pass -a/--author"
        if manifest is None:
            hint += " or run inside a project with a manifest"
        else:
            hint += " or add an author to the manifest"
        raise MissingAuthorError(
            code="E_MISSING_AUTHOR",
            message=f"no author could be determined ({hint})",
            file=manifest.manifest if manifest else None,
            path="author",
        )

    if license_expr is not None:
        expression, license_source = license_expr, "flag"
    elif manifest is not None and manifest.license:
        expression, license_source = manifest.license, "manifest"
    else:
        expression, license_source = DEFAULT_LICENSE, "default"

    log.debug("author %r from %s; license %r from %s", author, author_source, expression, license_source)
    return ResolvedMetadata(
        author=author,
        expression=expression,
        author_source=author_source,
        license_source=license_source,
    )

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LicenseTemplate:
    identifier: str
    name: str
    text: str


@dataclass(frozen=True)
class RenderedLicense:
    identifier: str
    text: str


@dataclass(frozen=True)
class ProjectMetadata:
    manifest: str
    authors: tuple[str, ...]
    license: Optional[str] = None


@dataclass(frozen=True)
class ResolvedMetadata:
    author: str
    expression: str

    # "flag" | "manifest" | "default"
    author_source: str = "flag"
    license_source: str = "flag"

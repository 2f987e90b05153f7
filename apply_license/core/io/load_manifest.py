from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Callable, Optional

from apply_license.core.errors import ManifestError
from apply_license.core.log import get_logger
from apply_license.core.model import ProjectMetadata

log = get_logger(__name__)

# Discovery order inside a project directory.
MANIFEST_NAMES: tuple[str, ...] = ("pyproject.toml", "Cargo.toml", "package.json")


def find_manifest(directory: str | Path | None = None) -> Optional[Path]:
    """Return the first known manifest in ``directory`` (default: cwd)."""
    root = Path(directory) if directory is not None else Path.cwd()
    for name in MANIFEST_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_manifest(path: str | Path) -> ProjectMetadata:
    """Read author and license fields from a project manifest.

    The format is chosen from the file name: ``*.toml`` files are read as
    pyproject.toml unless named Cargo.toml, ``*.json`` files as package.json.
    Does not validate the license expression; the parser owns that.
    """
    p = Path(path)
    if not p.is_file():
        raise ManifestError(
            code="E_MANIFEST_NOT_FOUND",
            message="manifest file does not exist",
            file=str(p),
        )

    try:
        raw_text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(code="E_MANIFEST_READ", message=f"unable to read manifest: {e}", file=str(p)) from e

    handler: Callable[[dict[str, Any]], tuple[list[str], Optional[str]]]
    suffix = p.suffix.lower()
    try:
        if p.name == "Cargo.toml":
            data = tomllib.loads(raw_text)
            handler = _cargo_fields
        elif suffix == ".toml":
            data = tomllib.loads(raw_text)
            handler = _pyproject_fields
        elif suffix == ".json":
            data = json.loads(raw_text)
            handler = _package_json_fields
        else:
            raise ManifestError(
                code="E_MANIFEST_UNSUPPORTED",
                message="supported manifests are pyproject.toml, Cargo.toml and package.json",
                file=str(p),
            )
    except ManifestError:
        raise
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        code = "E_MANIFEST_JSON_PARSE" if suffix == ".json" else "E_MANIFEST_TOML_PARSE"
        raise ManifestError(code=code, message=str(e), file=str(p)) from e

    if not isinstance(data, dict):
        raise ManifestError(
            code="E_MANIFEST_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(p),
        )

    authors, license_expr = handler(data)
    log.debug("manifest %s: authors=%r license=%r", p, authors, license_expr)
    return ProjectMetadata(manifest=str(p), authors=tuple(authors), license=license_expr)


def _pyproject_fields(data: dict[str, Any]) -> tuple[list[str], Optional[str]]:
    project = _table(data.get("project"))
    authors = _author_entries(project.get("authors"))
    if not authors:
        poetry = _table(_table(data.get("tool")).get("poetry"))
        authors = _author_entries(poetry.get("authors"))

    license_expr: Optional[str] = None
    license_field = project.get("license")
    if isinstance(license_field, str):
        license_expr = license_field
    elif isinstance(license_field, dict) and isinstance(license_field.get("text"), str):
        license_expr = license_field["text"]
    if license_expr is None and isinstance(project.get("license-expression"), str):
        license_expr = project["license-expression"]
    return authors, _non_blank(license_expr)


def _cargo_fields(data: dict[str, Any]) -> tuple[list[str], Optional[str]]:
    package = _table(data.get("package"))
    license_expr = package.get("license")
    return _author_entries(package.get("authors")), _non_blank(license_expr if isinstance(license_expr, str) else None)


def _package_json_fields(data: dict[str, Any]) -> tuple[list[str], Optional[str]]:
    authors = _author_entries([data.get("author")] if data.get("author") else None)
    if not authors:
        authors = _author_entries(data.get("authors"))
    license_expr = data.get("license")
    return authors, _non_blank(license_expr if isinstance(license_expr, str) else None)


def _author_entries(value: Any) -> list[str]:
    """Normalize author lists to strings, keeping ``Name <email>`` form.

    Accepts plain strings and ``{name, email}`` tables (pyproject.toml and
    package.json objects). Blank and unusable entries are dropped.
    """
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
        elif isinstance(item, dict):
            name = item.get("name")
            email = item.get("email")
            if isinstance(name, str) and name.strip():
                if isinstance(email, str) and email.strip():
                    out.append(f"{name.strip()} <{email.strip()}>")
                else:
                    out.append(name.strip())
    return out


def _table(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()

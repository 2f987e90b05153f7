from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from apply_license.core.errors import UnknownLicenseError
from apply_license.core.log import get_logger
from apply_license.core.model import LicenseTemplate


YEAR_MARKER = "{{ year }}"
HOLDERS_MARKER = "{{ copyright_holders }}"

BUNDLED_RESOURCE = "licenses.yaml"

log = get_logger(__name__)


class TemplateConfigError(ValueError):
    pass


def parse_templates(raw: Any, *, source: str) -> dict[str, LicenseTemplate]:
    """Validate a decoded template mapping.

    Format:
      <identifier>: {name: "...", text: "..."}
      <identifier>: "..."          # name defaults to the identifier

    Every text must contain both the year and the copyright holder markers.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise TemplateConfigError(f"{source}: template file must be a mapping of identifier -> template")

    out: dict[str, LicenseTemplate] = {}
    for k, v in raw.items():
        if not isinstance(k, str) or not k.strip():
            raise TemplateConfigError(f"{source}: license identifiers must be non-empty strings")
        identifier = k.strip()
        if _unselectable(identifier):
            raise TemplateConfigError(
                f"{source}: license identifier '{identifier}' cannot contain '/', parentheses or the words OR, AND, WITH"
            )
        if isinstance(v, str):
            name, text = identifier, v
        elif isinstance(v, dict):
            name = v.get("name", identifier)
            text = v.get("text")
            if not isinstance(name, str) or not name.strip():
                raise TemplateConfigError(f"{source}: template '{identifier}' name must be a non-empty string")
        else:
            raise TemplateConfigError(f"{source}: template '{identifier}' must be a string or a mapping")

        if not isinstance(text, str) or not text.strip():
            raise TemplateConfigError(f"{source}: template '{identifier}' text must be a non-empty string")
        for marker in (YEAR_MARKER, HOLDERS_MARKER):
            if marker not in text:
                raise TemplateConfigError(f"{source}: template '{identifier}' is missing the {marker} marker")
        out[identifier] = LicenseTemplate(identifier=identifier, name=name.strip(), text=text)
    return out


def bundled_templates() -> dict[str, LicenseTemplate]:
    """Return a fresh copy of the templates shipped with the package."""
    resource = resources.files("apply_license") / "data" / BUNDLED_RESOURCE
    raw = yaml.safe_load(resource.read_text(encoding="utf-8"))
    return parse_templates(raw, source=BUNDLED_RESOURCE)


def load_template_file(path: str | Path) -> dict[str, LicenseTemplate]:
    """Load user templates from a YAML file.

    Raises FileNotFoundError when the file is absent and TemplateConfigError
    when it cannot be read as UTF-8, is not valid YAML or is not a valid
    template mapping.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateConfigError(f"{p}: unable to read template file: {e}") from e
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateConfigError(f"{p}: invalid YAML: {e}") from e
    return parse_templates(raw, source=str(p))


def merged_templates(overrides: dict[str, LicenseTemplate] | None = None) -> dict[str, LicenseTemplate]:
    """Return the bundled templates merged with optional overrides.

    Overrides replace templates of the same identifier, and may add new ones.
    """
    merged = bundled_templates()
    if overrides:
        for k, v in overrides.items():
            if k in merged:
                log.debug("template %s overridden", k)
            merged[k] = v
    return merged


def load_and_merge(template_file: str | None) -> dict[str, LicenseTemplate]:
    if not template_file:
        return merged_templates()
    overrides = load_template_file(template_file)
    return merged_templates(overrides)


def lookup(templates: dict[str, LicenseTemplate], identifier: str) -> LicenseTemplate:
    try:
        return templates[identifier]
    except KeyError:
        raise UnknownLicenseError(
            code="E_UNKNOWN_LICENSE",
            message=f"unknown license: {identifier} (choose one of: {', '.join(sorted(templates.keys()))})",
            path="license",
        ) from None


def _unselectable(identifier: str) -> bool:
    # Identifiers must survive parse_expression unchanged.
    if any(ch in identifier for ch in "/()"):
        return True
    return any(word in ("OR", "AND", "WITH") for word in identifier.split())

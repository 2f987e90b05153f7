from pathlib import Path

import pytest

from apply_license.core.errors import UnknownLicenseError
from apply_license.core.expression.parse_expression import parse_expression
from apply_license.core.templates.template_config import (
    HOLDERS_MARKER,
    YEAR_MARKER,
    TemplateConfigError,
    bundled_templates,
    load_and_merge,
    load_template_file,
    lookup,
)


def test_bundled_templates_include_defaults():
    templates = bundled_templates()
    for identifier in ("MIT", "Apache-2.0", "BSD-2-Clause", "BSD-3-Clause", "ISC", "0BSD", "Zlib"):
        assert identifier in templates
        assert templates[identifier].identifier == identifier


def test_every_bundled_template_has_both_markers():
    for t in bundled_templates().values():
        assert YEAR_MARKER in t.text, t.identifier
        assert HOLDERS_MARKER in t.text, t.identifier


def test_apache_template_keeps_leading_indentation():
    text = bundled_templates()["Apache-2.0"].text
    assert text.splitlines()[0].strip() == "Apache License"
    assert text.startswith(" ")
    assert "END OF TERMS AND CONDITIONS" in text


def test_bundled_templates_are_fresh_copies():
    a = bundled_templates()
    a.pop("MIT")
    assert "MIT" in bundled_templates()


def test_lookup_unknown_license():
    templates = bundled_templates()
    with pytest.raises(UnknownLicenseError) as exc:
        lookup(templates, "GPL-9.0")
    assert exc.value.code == "E_UNKNOWN_LICENSE"
    assert "GPL-9.0" in exc.value.message
    assert "MIT" in exc.value.message


def test_lookup_is_case_sensitive():
    with pytest.raises(UnknownLicenseError):
        lookup(bundled_templates(), "mit")


def test_template_file_adds_and_overrides(tmp_path: Path):
    p = tmp_path / "templates.yaml"
    p.write_text(
        "Internal-1.0:\n"
        "  name: Internal License\n"
        "  text: |\n"
        "    Copyright {{ year }} {{ copyright_holders }}. All rights reserved.\n"
        "MIT: \"Short MIT {{ year }} {{ copyright_holders }}\"\n",
        encoding="utf-8",
    )
    templates = load_and_merge(str(p))

    assert templates["Internal-1.0"].name == "Internal License"
    assert templates["MIT"].text == "Short MIT {{ year }} {{ copyright_holders }}"
    assert templates["MIT"].name == "MIT"
    assert "Apache-2.0" in templates


def test_load_and_merge_without_file_returns_bundled():
    assert set(load_and_merge(None)) == set(bundled_templates())


def test_empty_template_file_is_no_op(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_template_file(p) == {}


def test_missing_template_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_and_merge(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize(
    "content, fragment",
    [
        ("- just\n- a list\n", "must be a mapping"),
        ("X: 3\n", "must be a string or a mapping"),
        ("X:\n  name: X\n", "text must be a non-empty string"),
        ("X: \"no markers here\"\n", "missing the {{ year }} marker"),
        ("X: \"{{ year }} only\"\n", "missing the {{ copyright_holders }} marker"),
        ("X: [unclosed\n", "invalid YAML"),
    ],
)
def test_invalid_template_file(tmp_path: Path, content: str, fragment: str):
    p = tmp_path / "bad.yaml"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(TemplateConfigError) as exc:
        load_template_file(p)
    assert fragment in str(exc.value)


def test_template_identifier_with_spaces_is_selectable(tmp_path: Path):
    p = tmp_path / "templates.yaml"
    p.write_text('Internal License: "(c) {{ year }} {{ copyright_holders }}"\n', encoding="utf-8")
    templates = load_and_merge(str(p))
    for identifier in parse_expression("Internal License OR MIT"):
        assert lookup(templates, identifier).identifier == identifier


@pytest.mark.parametrize("identifier", ["A/B", "A OR B", "A AND B", "GPL WITH X", "(A)"])
def test_unselectable_identifier_is_rejected(tmp_path: Path, identifier: str):
    p = tmp_path / "templates.yaml"
    p.write_text(f'"{identifier}": "{{{{ year }}}} {{{{ copyright_holders }}}}"\n', encoding="utf-8")
    with pytest.raises(TemplateConfigError) as exc:
        load_template_file(p)
    assert "cannot contain" in str(exc.value)


def test_template_path_is_directory(tmp_path: Path):
    d = tmp_path / "tpl"
    d.mkdir()
    with pytest.raises(TemplateConfigError) as exc:
        load_template_file(d)
    assert "unable to read template file" in str(exc.value)


def test_template_file_not_utf8(tmp_path: Path):
    p = tmp_path / "t.yaml"
    p.write_bytes(b"X: \"\xff {{ year }} {{ copyright_holders }}\"\n")
    with pytest.raises(TemplateConfigError) as exc:
        load_template_file(p)
    assert "unable to read template file" in str(exc.value)

from __future__ import annotations

import logging
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from apply_license.core.apply import generate_license_files
from apply_license.core.errors import LicenseError, LicenseIOError, ManifestError
from apply_license.core.io.emit import write_license_files
from apply_license.core.io.load_manifest import find_manifest, load_manifest
from apply_license.core.log import configure_logging, get_logger
from apply_license.core.model import LicenseTemplate, ProjectMetadata
from apply_license.core.resolve.resolve_metadata import resolve_metadata
from apply_license.core.templates.template_config import TemplateConfigError, load_and_merge

TEMPLATE_FILE_ENVVAR = "APPLY_LICENSE_TEMPLATE_FILE"

log = get_logger(__name__)

app = typer.Typer(add_completion=False)
project_app = typer.Typer(add_completion=False)


@app.command()
def apply_license_cmd(
    author: Optional[list[str]] = typer.Option(
        None, "--author", "-a", help="Copyright holder. Can be given multiple times."
    ),
    license: str | None = typer.Option(
        None, "--license", "-l", help="License expression, e.g. 'MIT OR Apache-2.0'"
    ),
    manifest_path: str | None = typer.Option(
        None,
        "--manifest-path",
        help="Project manifest to read defaults from (default: pyproject.toml, Cargo.toml or package.json in the current directory)",
    ),
    template_file: str | None = typer.Option(
        None,
        "--template-file",
        envvar=TEMPLATE_FILE_ENVVAR,
        help="Optional YAML file to add/override license templates",
    ),
    output_dir: str | None = typer.Option(
        None, "--output-dir", help="Directory to write into (default: current directory)"
    ),
    list_templates: bool = typer.Option(False, "--list", help="List available licenses and exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details to stderr"),
) -> None:
    """Apply open-source licenses to your project."""
    _configure(verbose)
    templates = _load_templates(template_file)

    if list_templates:
        _print_templates(templates)
        return

    manifest = _standalone_manifest(manifest_path, flags_complete=bool(author) and license is not None)
    if manifest is None and license is None:
        _fail(
            LicenseError(
                code="E_LICENSE_REQUIRED",
                message="-l/--license is required when no project manifest is present",
                path="license",
            )
        )

    _apply(
        authors=author,
        license_expr=license,
        manifest=manifest,
        templates=templates,
        output_dir=output_dir,
    )


@project_app.command()
def apply_project_license_cmd(
    manifest_path: str | None = typer.Option(
        None,
        "--manifest-path",
        help="Path to pyproject.toml, Cargo.toml or package.json (default: discovered in the current directory)",
    ),
    license: str | None = typer.Option(
        None, "--license", "-l", help="License expression. Overrides the manifest value."
    ),
    author: Optional[list[str]] = typer.Option(
        None, "--author", "-a", help="Copyright holder. Overrides the manifest authors."
    ),
    template_file: str | None = typer.Option(
        None,
        "--template-file",
        envvar=TEMPLATE_FILE_ENVVAR,
        help="Optional YAML file to add/override license templates",
    ),
    output_dir: str | None = typer.Option(
        None, "--output-dir", help="Directory to write into (default: current directory)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details to stderr"),
) -> None:
    """Apply open-source licenses to your project.

    Parses author and license information from the project manifest.
    """
    _configure(verbose)
    templates = _load_templates(template_file)

    if manifest_path is None:
        found = find_manifest()
        if found is None:
            _fail(
                ManifestError(
                    code="E_MANIFEST_NOT_FOUND",
                    message="no pyproject.toml, Cargo.toml or package.json in the current directory",
                    path="manifest_path",
                )
            )
        manifest_path = str(found)

    try:
        manifest = load_manifest(manifest_path)
    except ManifestError as e:
        _fail(e)

    _apply(
        authors=author,
        license_expr=license,
        manifest=manifest,
        templates=templates,
        output_dir=output_dir,
    )


def _apply(
    *,
    authors: Optional[list[str]],
    license_expr: str | None,
    manifest: Optional[ProjectMetadata],
    templates: dict[str, LicenseTemplate],
    output_dir: str | None,
) -> None:
    try:
        resolved = resolve_metadata(authors=authors, license_expr=license_expr, manifest=manifest)
        files = generate_license_files(resolved, templates)
        written = write_license_files(files, output_dir)
    except LicenseError as e:
        _fail(e)

    for path in written:
        typer.echo(f"OK: wrote {path}")


def _standalone_manifest(manifest_path: str | None, *, flags_complete: bool) -> Optional[ProjectMetadata]:
    """Load an explicit manifest, or one discovered in the cwd when flags leave gaps.

    Only an explicit --manifest-path is fatal when it cannot be loaded; a
    discovered manifest that fails to load is ignored with a warning.
    """
    if manifest_path:
        try:
            return load_manifest(manifest_path)
        except ManifestError as e:
            _fail(e)

    if flags_complete:
        return None
    found = find_manifest()
    if found is None:
        return None
    try:
        return load_manifest(found)
    except ManifestError as e:
        log.warning("ignoring unreadable manifest: %s", e)
        return None


def _load_templates(template_file: str | None) -> dict[str, LicenseTemplate]:
    try:
        return load_and_merge(template_file)
    except FileNotFoundError:
        _fail(
            LicenseError(
                code="E_TEMPLATE_FILE_NOT_FOUND",
                message=f"template file not found: {template_file}",
                path="template_file",
            ),
            exit_code=1,
        )
    except TemplateConfigError as e:
        _fail(
            LicenseError(
                code="E_TEMPLATE_FILE_INVALID",
                message=str(e),
                path="template_file",
            ),
            exit_code=1,
        )


def _print_templates(templates: dict[str, LicenseTemplate]) -> None:
    table = Table(title="Available licenses")
    table.add_column("Identifier")
    table.add_column("Name")
    for identifier in sorted(templates.keys()):
        table.add_row(identifier, templates[identifier].name)
    Console().print(table)


def _configure(verbose: bool) -> None:
    configure_logging(level=logging.DEBUG if verbose else logging.WARNING)


def _exit_code(error: LicenseError) -> int:
    if isinstance(error, (LicenseIOError, ManifestError)):
        return 1
    return 2


def _fail(error: LicenseError, exit_code: int | None = None) -> NoReturn:
    _print_errors([error])
    raise typer.Exit(code=exit_code if exit_code is not None else _exit_code(error))


def _print_errors(errors: list[LicenseError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="apply-license")


def project_main() -> None:
    project_app(prog_name="apply-project-license")


if __name__ == "__main__":
    main()

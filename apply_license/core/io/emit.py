from __future__ import annotations

from pathlib import Path

from apply_license.core.errors import LicenseIOError
from apply_license.core.log import get_logger
from apply_license.core.model import RenderedLicense

log = get_logger(__name__)

SINGLE_FILE_NAME = "LICENSE"


def license_file_name(identifier: str, *, multiple: bool) -> str:
    if not multiple:
        return SINGLE_FILE_NAME
    return f"{SINGLE_FILE_NAME}-{identifier}"


def plan_license_files(rendered: list[RenderedLicense]) -> dict[str, str]:
    """Map output file names to contents.

    One license yields ``LICENSE``; several yield ``LICENSE-<id>`` each, with
    the identifier copied verbatim. Insertion order follows ``rendered``.
    """
    multiple = len(rendered) > 1
    return {license_file_name(r.identifier, multiple=multiple): r.text for r in rendered}


def write_license_files(files: dict[str, str], directory: str | Path | None = None) -> list[Path]:
    """Write planned files into ``directory`` (default: cwd), overwriting.

    The directory must already exist. The first filesystem error aborts the
    run as LicenseIOError; files written before it are left in place.
    """
    root = Path(directory) if directory is not None else Path.cwd()
    written: list[Path] = []
    for name, contents in files.items():
        target = root / name
        try:
            target.write_text(contents, encoding="utf-8")
        except OSError as e:
            raise LicenseIOError(
                code="E_WRITE",
                message=f"unable to write {name}: {e.strerror or e}",
                file=str(target),
            ) from e
        log.info("wrote %s", target)
        written.append(target)
    return written

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LicenseError(Exception):
    """Base error for license generation.

    ``code`` is a stable identifier such as ``E_UNKNOWN_LICENSE``. ``file`` names
    the manifest, template file or output file involved, and ``path`` the
    option or manifest field (``license``, ``author``, ``template_file``).
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<license>"
        return f"{loc}: {self.code}: {self.message}"


class ParseError(LicenseError):
    pass


class UnknownLicenseError(LicenseError):
    pass


class MissingAuthorError(LicenseError):
    pass


class ManifestError(LicenseError):
    pass


class LicenseIOError(LicenseError):
    pass

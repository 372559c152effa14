"""Resolved app models.

This module defines the data structures produced by app resolution:
metadata returned by the marketplace and the final display unit.
"""

from dataclasses import dataclass, field
from enum import Enum


class AppSource(Enum):
    """Provenance of a resolved app."""

    MARKETPLACE = "marketplace"
    EXTERNAL = "external"


@dataclass(frozen=True, slots=True)
class MarketplaceApp:
    """Metadata returned by a marketplace lookup.

    Attributes:
        package_name: Package identifier.
        display_name: Human-readable name. Empty means the marketplace
            did not really recognize the package.
        version_name: Version string published by the marketplace.
        version_code: Version code published by the marketplace.
        icon_url: Icon URL, if the marketplace provides one.
        size_bytes: Download size in bytes (0 if unknown).
    """

    package_name: str
    display_name: str
    version_name: str = ""
    version_code: int = 0
    icon_url: str | None = field(default=None)
    size_bytes: int = 0


@dataclass(frozen=True, slots=True)
class ResolvedApp:
    """Final app unit shown to the user.

    Attributes:
        display_name: Human-readable name.
        package_name: Package identifier.
        version_name: Version string for display.
        version_code: Version code used for update comparison.
        icon_url: Icon reference (URL or placeholder name).
        source: Whether the app comes from the marketplace or an external host.
        category: Category the app is displayed under.
        apk_url: Artifact URL for external apps, None for marketplace apps.
        size_bytes: Artifact size in bytes (0 if unknown).
        installed_version_code: Version code installed on the device, if any.
    """

    display_name: str
    package_name: str
    version_name: str
    version_code: int
    icon_url: str
    source: AppSource
    category: str
    apk_url: str | None = field(default=None)
    size_bytes: int = 0
    installed_version_code: int | None = field(default=None)

    @property
    def is_external(self) -> bool:
        """Check if the app is hosted outside the marketplace."""
        return self.source == AppSource.EXTERNAL

    @property
    def is_installed(self) -> bool:
        """Check if any version of the app is installed."""
        return self.installed_version_code is not None

    @property
    def has_update(self) -> bool:
        """Check if the installed version is older than the offered one.

        Only version codes are compared; version_name is display only.
        """
        if self.installed_version_code is None:
            return False
        return self.installed_version_code < self.version_code

    @property
    def size_human(self) -> str:
        """Return human-readable size string."""
        if not self.size_bytes:
            return "unknown"

        size = float(self.size_bytes)
        for unit in ("B", "KB", "MB", "GB"):
            if size < 1024:
                return f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} TB"

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "display_name": self.display_name,
            "package_name": self.package_name,
            "version_name": self.version_name,
            "version_code": self.version_code,
            "icon_url": self.icon_url,
            "source": self.source.value,
            "category": self.category,
            "apk_url": self.apk_url,
            "size_bytes": self.size_bytes,
            "installed_version_code": self.installed_version_code,
            "has_update": self.has_update,
        }

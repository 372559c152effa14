"""Whitelist entry models and parsing.

A whitelist entry is an opaque string as persisted. Two textual shapes exist:

- Package reference: ``"com.example.app"`` or ``"com.example.app Category Name"``
- External app: ``"Name|com.example.app|1.2.3|https://host/app.apk[|iconUrl[|category]]"``

Parsing never raises. Entries that cannot be parsed are dropped and
reported to the caller as ``None``.
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Delimiter that marks the external app format
EXTERNAL_DELIMITER = "|"

# Minimum pipe fields for an external app: name, package, version, apk url
MIN_EXTERNAL_FIELDS = 4


def parse_version_code(version_name: str) -> int:
    """Derive an integer version code from a dotted version string.

    Computed as ``major * 10000 + minor * 100 + patch``. Each component is
    parsed independently and defaults to 0 when missing or non-numeric.

    Examples:
        >>> parse_version_code("1.2.3")
        10203
        >>> parse_version_code("1.2")
        10200
        >>> parse_version_code("bad")
        0

    Args:
        version_name: Version string such as "5.4.3".

    Returns:
        Derived version code, 0 if nothing could be parsed.
    """
    parts = version_name.split(".")
    components: list[int] = []
    for index in range(3):
        try:
            components.append(int(parts[index]))
        except (IndexError, ValueError):
            components.append(0)
    major, minor, patch = components
    return major * 10000 + minor * 100 + patch


@dataclass(frozen=True, slots=True)
class PackageRef:
    """Whitelist entry naming a marketplace-backed app.

    Attributes:
        package_name: Package identifier (e.g., 'org.mozilla.firefox').
        category: Optional category name taken verbatim from the entry.
    """

    package_name: str
    category: str | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.package_name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def is_external(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class ExternalApp:
    """Whitelist entry describing an app hosted outside the marketplace.

    Attributes:
        display_name: Human-readable app name.
        package_name: Package identifier.
        version_name: Advisory version string, display only.
        version_code: Code derived from version_name, used for update checks.
        apk_url: URL of the downloadable artifact.
        icon_url: Optional icon URL.
        category: Optional category name.
    """

    display_name: str
    package_name: str
    version_name: str
    version_code: int
    apk_url: str
    icon_url: str | None = field(default=None)
    category: str | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.package_name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def is_external(self) -> bool:
        return True


# A successfully parsed whitelist entry
ParsedEntry = PackageRef | ExternalApp


def is_external_entry(entry: str) -> bool:
    """Check whether a raw entry uses the external app format."""
    return EXTERNAL_DELIMITER in entry


def _optional_field(parts: list[str], index: int) -> str | None:
    """Return a trimmed optional field, treating empty as absent."""
    if index >= len(parts):
        return None
    value = parts[index].strip()
    return value or None


def _parse_external(entry: str) -> ExternalApp | None:
    parts = entry.split(EXTERNAL_DELIMITER)
    required = [part.strip() for part in parts[:MIN_EXTERNAL_FIELDS]]
    if len(required) < MIN_EXTERNAL_FIELDS or not all(required):
        logger.debug("Dropping external entry with missing fields: %r", entry)
        return None

    display_name, package_name, version_name, apk_url = required
    return ExternalApp(
        display_name=display_name,
        package_name=package_name,
        version_name=version_name,
        version_code=parse_version_code(version_name),
        apk_url=apk_url,
        icon_url=_optional_field(parts, 4),
        category=_optional_field(parts, 5),
    )


def _parse_package_ref(entry: str) -> PackageRef | None:
    package_name, _, category = entry.partition(" ")
    if not package_name:
        logger.debug("Dropping entry with empty package name: %r", entry)
        return None
    return PackageRef(package_name=package_name, category=category or None)


def parse_entry(entry: str) -> ParsedEntry | None:
    """Parse one raw whitelist entry into a typed variant.

    Args:
        entry: Raw whitelist entry string.

    Returns:
        PackageRef or ExternalApp, or None when the entry is dropped.
    """
    if is_external_entry(entry):
        return _parse_external(entry)
    return _parse_package_ref(entry)


def parse_entries(entries: set[str] | frozenset[str]) -> list[ParsedEntry]:
    """Parse a set of raw entries, skipping the ones that are dropped."""
    parsed: list[ParsedEntry] = []
    for entry in entries:
        result = parse_entry(entry)
        if result is not None:
            parsed.append(result)
    return parsed


def extract_package_name(entry: str) -> str | None:
    """Get the package name a raw entry refers to.

    Returns:
        Package name, or None if the entry does not parse.
    """
    parsed = parse_entry(entry)
    return parsed.package_name if parsed is not None else None

"""Resolution of whitelist entries into displayable apps.

This module combines external app descriptors with marketplace metadata,
buckets the result by category, and honors the authentication gate:
without a marketplace session only external apps are resolved.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from types import TracebackType

import httpx

from storegate.core.auth import requires_auth
from storegate.core.categorizer import categorize, find_categories, sort_categories
from storegate.core.store import WhitelistStore
from storegate.models.app import AppSource, MarketplaceApp, ResolvedApp
from storegate.models.entry import ExternalApp, PackageRef, parse_entries

logger = logging.getLogger(__name__)

# Collaborator signatures
MarketplaceLookup = Callable[[list[str]], list[MarketplaceApp]]
InstalledVersionLookup = Callable[[str], int | None]
IconStrategy = Callable[[ExternalApp], str | None]

# Icon reference used when no strategy yields one
PLACEHOLDER_ICON = "placeholder"


def no_marketplace(package_names: list[str]) -> list[MarketplaceApp]:
    """Marketplace lookup that recognizes nothing."""
    return []


def not_installed(package_name: str) -> int | None:
    """Installed version lookup for a device with nothing installed."""
    return None


def provided_icon(app: ExternalApp) -> str | None:
    """Icon strategy using the icon URL given in the whitelist entry."""
    return app.icon_url


def probe_size(client: httpx.Client, url: str) -> int:
    """Get the size of a downloadable artifact with a HEAD request.

    Best effort: any failure yields 0, which only affects progress display.

    Args:
        client: HTTP client to use.
        url: Artifact URL.

    Returns:
        Content-Length in bytes, or 0 if unknown.
    """
    try:
        response = client.head(url)
    except httpx.HTTPError as e:
        logger.debug("Size probe failed for %s: %s", url, e)
        return 0

    if not response.is_success:
        logger.debug("Size probe for %s returned status %d", url, response.status_code)
        return 0

    try:
        return max(int(response.headers.get("Content-Length", "0")), 0)
    except ValueError:
        return 0


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Categorized apps ready for display.

    Attributes:
        categories: Category name to apps, in display order. Apps within a
            category are sorted by display name.
        requires_auth: True if package references were withheld because
            there is no marketplace session.
    """

    categories: dict[str, list[ResolvedApp]]
    requires_auth: bool = False

    @property
    def apps(self) -> list[ResolvedApp]:
        """All apps once each, sorted case-insensitively by display name."""
        seen: dict[str, ResolvedApp] = {}
        for apps in self.categories.values():
            for app in apps:
                seen.setdefault(app.package_name, app)
        return sorted(seen.values(), key=lambda app: app.display_name.casefold())

    @property
    def is_empty(self) -> bool:
        return not self.categories


def filter_categories(
    categories: dict[str, list[ResolvedApp]], query: str
) -> dict[str, list[ResolvedApp]]:
    """Filter categorized apps by a search query.

    Matches display name or package name case-insensitively. Categories
    left without apps are dropped. A blank query returns the input as is.
    """
    if not query.strip():
        return categories

    needle = query.strip().casefold()
    filtered: dict[str, list[ResolvedApp]] = {}
    for name, apps in categories.items():
        matches = [
            app
            for app in apps
            if needle in app.display_name.casefold() or needle in app.package_name.casefold()
        ]
        if matches:
            filtered[name] = matches
    return filtered


def filter_whitelisted(package_names: Iterable[str], store: WhitelistStore) -> list[str]:
    """Keep only packages named by the whitelist, preserving order.

    Used to narrow marketplace listings down to whitelisted apps.
    """
    allowed = store.package_names()
    return [name for name in package_names if name in allowed]


class AppResolver:
    """Turns raw whitelist entries into categorized, sorted apps.

    Example:
        >>> with AppResolver(marketplace.lookup, device.installed_version) as resolver:
        ...     result = resolver.resolve(store.get(), is_authenticated=True)
        ...     for category, apps in result.categories.items():
        ...         print(category, [app.display_name for app in apps])
    """

    def __init__(
        self,
        marketplace_lookup: MarketplaceLookup = no_marketplace,
        installed_version_lookup: InstalledVersionLookup = not_installed,
        *,
        client: httpx.Client | None = None,
        placeholder_icon: str = PLACEHOLDER_ICON,
        probe_sizes: bool = True,
        timeout: float = 10.0,
    ) -> None:
        """Initialize AppResolver.

        Args:
            marketplace_lookup: Returns metadata for the given package names.
            installed_version_lookup: Returns the installed version code of a
                package, None if not installed.
            client: Optional HTTP client for size probes. The resolver only
                closes clients it created itself.
            placeholder_icon: Icon reference used as last resort.
            probe_sizes: Whether to probe external artifact sizes.
            timeout: Timeout for size probes when no client is given.
        """
        self._marketplace_lookup = marketplace_lookup
        self._installed_version_lookup = installed_version_lookup
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self.placeholder_icon = placeholder_icon
        self.probe_sizes = probe_sizes

    def resolve(self, entries: Iterable[str], is_authenticated: bool) -> ResolutionResult:
        """Resolve entries into categorized apps.

        Args:
            entries: Raw whitelist entries.
            is_authenticated: Whether a marketplace session exists.

        Returns:
            ResolutionResult with apps bucketed by category. When package
            references exist but there is no session, only external apps
            are included and requires_auth is set.
        """
        raw_entries = list(entries)
        parsed = parse_entries(set(raw_entries))

        externals = self._unique_externals(parsed)
        external_names = {app.package_name for app in externals}
        package_refs = sorted(
            {
                entry.package_name
                for entry in parsed
                if isinstance(entry, PackageRef) and entry.package_name not in external_names
            }
        )

        auth_required = requires_auth(raw_entries, is_authenticated) and bool(package_refs)
        if auth_required:
            logger.info(
                "Withholding %d marketplace apps until authenticated", len(package_refs)
            )
            strategies: list[IconStrategy] = [provided_icon]
            resolved = [self._resolve_external(app, strategies) for app in externals]
        else:
            strategies = [provided_icon]
            if is_authenticated:
                strategies.append(self._marketplace_icon)
            resolved = self._resolve_marketplace(package_refs)
            resolved += [self._resolve_external(app, strategies) for app in externals]

        resolved.sort(key=lambda app: app.display_name.casefold())
        logger.debug("Resolved %d apps (%d external)", len(resolved), len(externals))

        return ResolutionResult(
            categories=self._bucket(resolved, categorize(raw_entries)),
            requires_auth=auth_required,
        )

    @staticmethod
    def _unique_externals(parsed: list[PackageRef | ExternalApp]) -> list[ExternalApp]:
        by_package: dict[str, ExternalApp] = {}
        for entry in parsed:
            if isinstance(entry, ExternalApp):
                current = by_package.get(entry.package_name)
                # Deterministic pick when one package has several descriptors
                if current is None or entry.version_code > current.version_code:
                    by_package[entry.package_name] = entry
        return list(by_package.values())

    def _installed_version(self, package_name: str) -> int | None:
        try:
            return self._installed_version_lookup(package_name)
        except Exception as e:
            logger.debug("Installed version lookup failed for %s: %s", package_name, e)
            return None

    def _lookup(self, package_names: list[str]) -> list[MarketplaceApp]:
        try:
            return self._marketplace_lookup(package_names)
        except Exception as e:
            logger.warning("Marketplace lookup failed for %d packages: %s", len(package_names), e)
            return []

    def _resolve_marketplace(self, package_names: list[str]) -> list[ResolvedApp]:
        if not package_names:
            return []

        requested = set(package_names)
        resolved: dict[str, ResolvedApp] = {}
        for meta in self._lookup(package_names):
            if meta.package_name not in requested or not meta.display_name:
                continue
            resolved.setdefault(
                meta.package_name,
                ResolvedApp(
                    display_name=meta.display_name,
                    package_name=meta.package_name,
                    version_name=meta.version_name,
                    version_code=meta.version_code,
                    icon_url=meta.icon_url or self.placeholder_icon,
                    source=AppSource.MARKETPLACE,
                    category="",
                    size_bytes=meta.size_bytes,
                    installed_version_code=self._installed_version(meta.package_name),
                ),
            )

        missing = requested - resolved.keys()
        if missing:
            logger.debug("Marketplace did not resolve: %s", ", ".join(sorted(missing)))
        return list(resolved.values())

    def _marketplace_icon(self, app: ExternalApp) -> str | None:
        """Icon strategy asking the marketplace for the package's icon."""
        for meta in self._marketplace_lookup([app.package_name]):
            if meta.package_name == app.package_name and meta.icon_url:
                return meta.icon_url
        return None

    def _resolve_icon(self, app: ExternalApp, strategies: list[IconStrategy]) -> str:
        for strategy in strategies:
            try:
                icon = strategy(app)
            except Exception as e:
                logger.debug("Icon strategy failed for %s: %s", app.package_name, e)
                continue
            if icon:
                return icon
        return self.placeholder_icon

    def _resolve_external(self, app: ExternalApp, strategies: list[IconStrategy]) -> ResolvedApp:
        return ResolvedApp(
            display_name=app.display_name,
            package_name=app.package_name,
            version_name=app.version_name,
            version_code=app.version_code,
            icon_url=self._resolve_icon(app, strategies),
            source=AppSource.EXTERNAL,
            category="",
            apk_url=app.apk_url,
            size_bytes=probe_size(self._client, app.apk_url) if self.probe_sizes else 0,
            installed_version_code=self._installed_version(app.package_name),
        )

    @staticmethod
    def _bucket(
        apps: list[ResolvedApp], category_map: dict[str, list[str]]
    ) -> dict[str, list[ResolvedApp]]:
        buckets: dict[str, list[ResolvedApp]] = {}
        for app in apps:
            for category in find_categories(category_map, app.package_name):
                buckets.setdefault(category, []).append(replace(app, category=category))
        return sort_categories(buckets)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AppResolver":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

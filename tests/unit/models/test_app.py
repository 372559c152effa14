"""Unit tests for resolved app models."""

import pytest
from storegate.models.app import AppSource, ResolvedApp


def _app(**overrides: object) -> ResolvedApp:
    values: dict[str, object] = {
        "display_name": "Uber",
        "package_name": "com.uber.app",
        "version_name": "1.2.3",
        "version_code": 10203,
        "icon_url": "https://x/i.png",
        "source": AppSource.EXTERNAL,
        "category": "Transport",
        "apk_url": "https://x/u.apk",
    }
    values.update(overrides)
    return ResolvedApp(**values)  # type: ignore[arg-type]


class TestHasUpdate:
    """Tests for ResolvedApp.has_update property."""

    def test_not_installed(self) -> None:
        app = _app()
        assert app.is_installed is False
        assert app.has_update is False

    def test_older_installed(self) -> None:
        """Strictly lower installed code means an update."""
        app = _app(installed_version_code=10202)
        assert app.is_installed is True
        assert app.has_update is True

    def test_same_installed(self) -> None:
        assert _app(installed_version_code=10203).has_update is False

    def test_newer_installed(self) -> None:
        assert _app(installed_version_code=20000).has_update is False

    def test_version_name_is_ignored(self) -> None:
        """Only version codes are compared."""
        app = _app(version_name="9.9.9", version_code=100, installed_version_code=100)
        assert app.has_update is False


class TestResolvedAppProperties:
    """Tests for other ResolvedApp properties."""

    def test_is_external(self) -> None:
        assert _app().is_external is True
        assert _app(source=AppSource.MARKETPLACE).is_external is False

    @pytest.mark.parametrize(
        ("size", "expected"),
        [(0, "unknown"), (512, "512.0 B"), (2048, "2.0 KB"), (5 * 1024 * 1024, "5.0 MB")],
    )
    def test_size_human(self, size: int, expected: str) -> None:
        assert _app(size_bytes=size).size_human == expected

    def test_to_dict(self) -> None:
        data = _app(installed_version_code=1).to_dict()

        assert data["source"] == "external"
        assert data["package_name"] == "com.uber.app"
        assert data["has_update"] is True

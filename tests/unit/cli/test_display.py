"""Unit tests for display helpers."""

from storegate.cli.display import create_categories_table, create_changes_table
from storegate.core.events import WhitelistChanged
from storegate.models.app import AppSource, ResolvedApp
from storegate.utils.formatting import format_app_row


class TestCreateChangesTable:
    """Tests for create_changes_table function."""

    def test_rows_for_added_and_removed(self) -> None:
        event = WhitelistChanged(entries=frozenset({"a", "b"}), previous=frozenset({"b", "c"}))

        table = create_changes_table(event)

        assert table.row_count == 2
        assert table.title == "Whitelist Changes"


def test_categories_table() -> None:
    table = create_categories_table({"Media": ["b", "a"], "Other": ["c"]})
    assert table.row_count == 2


class TestFormatAppRow:
    """Tests for format_app_row function."""

    def _app(self, **overrides: object) -> ResolvedApp:
        values: dict[str, object] = {
            "display_name": "Uber",
            "package_name": "com.uber.app",
            "version_name": "1.2.3",
            "version_code": 10203,
            "icon_url": "placeholder",
            "source": AppSource.EXTERNAL,
            "category": "Transport",
        }
        values.update(overrides)
        return ResolvedApp(**values)  # type: ignore[arg-type]

    def test_external_not_installed(self) -> None:
        icon, name, package, version, size, status = format_app_row(self._app())

        assert "◇" in icon
        assert "Uber" in name
        assert package == "com.uber.app"
        assert version == "1.2.3"
        assert size == "unknown"
        assert "-" in status

    def test_marketplace_update_available(self) -> None:
        row = format_app_row(
            self._app(source=AppSource.MARKETPLACE, installed_version_code=10000)
        )

        assert "◆" in row[0]
        assert "update available" in row[5]

    def test_installed_current(self) -> None:
        row = format_app_row(self._app(installed_version_code=10203))
        assert "installed" in row[5]

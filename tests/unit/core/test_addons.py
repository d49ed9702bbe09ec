"""Unit tests for the addon catalog."""

from pathlib import Path

import pytest

from airlinkctl.core.addons import (
    AddonCatalogError,
    UnknownAddonError,
    load_addon_catalog,
    resolve_addons,
)


class TestLoadAddonCatalog:
    """Tests for load_addon_catalog."""

    def test_bundled_entries(self, tmp_path: Path) -> None:
        """The bundled catalog ships the stock addons."""
        catalog = load_addon_catalog(tmp_path / "none.toml")
        assert "modrinth" in catalog
        assert catalog["modrinth"].directory == "modrinth"

    def test_user_entries_appended(self, tmp_path: Path) -> None:
        """User entries are added after the bundled ones."""
        user = tmp_path / "addons.toml"
        user.write_text(
            '[addons.mine]\ndisplay_name = "Mine"\n'
            'repo_url = "https://example.com/mine.git"\ndirectory = "mine"\n'
        )
        catalog = load_addon_catalog(user)
        assert list(catalog)[-1] == "mine"
        assert catalog["mine"].branch == "main"

    def test_user_entry_overrides_bundled(self, tmp_path: Path) -> None:
        """Same key replaces the bundled entry."""
        user = tmp_path / "addons.toml"
        user.write_text(
            '[addons.modrinth]\ndisplay_name = "Fork"\n'
            'repo_url = "https://example.com/fork.git"\ndirectory = "modrinth"\n'
        )
        assert load_addon_catalog(user)["modrinth"].display_name == "Fork"

    def test_invalid_entry(self, tmp_path: Path) -> None:
        """Entries missing required fields are rejected."""
        user = tmp_path / "addons.toml"
        user.write_text('[addons.bad]\ndisplay_name = "Bad"\n')
        with pytest.raises(AddonCatalogError, match="Invalid addon 'bad'"):
            load_addon_catalog(user)


class TestResolveAddons:
    """Tests for resolve_addons."""

    def test_resolves_in_order(self, tmp_path: Path) -> None:
        """Entries come back in requested order."""
        catalog = load_addon_catalog(tmp_path / "none.toml")
        entries = resolve_addons(["parachute", "modrinth"], catalog)
        assert [e.directory for e in entries] == ["parachute", "modrinth"]

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys list the available ones."""
        catalog = load_addon_catalog(tmp_path / "none.toml")
        with pytest.raises(UnknownAddonError, match="modrinth"):
            resolve_addons(["nope"], catalog)

"""Тесты каталога языков."""

import json

import pytest

from tesseract_api.errors import CatalogError
from tesseract_api.services.language_catalog import LanguageCatalog, load_catalog


@pytest.fixture
def catalog(catalog_file):
    return LanguageCatalog.from_file(catalog_file, {"eng", "fra"})


class TestLoadCatalog:
    def test_keeps_file_order(self, catalog_file):
        languages = load_catalog(catalog_file)
        assert [lang.key for lang in languages] == ["eng", "fra", "spa"]
        assert languages[0].display_name == "English"

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_catalog(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "shape.json"
        path.write_text(json.dumps({"eng": "English"}), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_key_must_have_three_letters(self, tmp_path):
        path = tmp_path / "long.json"
        path.write_text(json.dumps([{"key": "chi_sim", "displayName": "Chinese"}]), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_duplicate_keys(self, tmp_path):
        path = tmp_path / "dup.json"
        path.write_text(
            json.dumps([
                {"key": "eng", "displayName": "English"},
                {"key": "eng", "displayName": "English again"},
            ]),
            encoding="utf-8",
        )
        with pytest.raises(CatalogError, match="eng"):
            load_catalog(path)

    def test_bundled_catalog_is_valid(self):
        from tesseract_api.config import DEFAULT_LANGUAGES_FILE

        keys = [lang.key for lang in load_catalog(DEFAULT_LANGUAGES_FILE)]
        assert "eng" in keys
        assert "rus" in keys
        assert len(keys) == len(set(keys))


class TestListInstalled:
    def test_filters_installed_in_catalog_order(self, catalog):
        assert [lang.key for lang in catalog.list_installed()] == ["eng", "fra"]

    def test_order_does_not_depend_on_config(self, catalog_file):
        catalog = LanguageCatalog.from_file(catalog_file, ["spa", "eng"])
        assert [lang.key for lang in catalog.list_installed()] == ["eng", "spa"]

    def test_list_all(self, catalog):
        assert [lang.key for lang in catalog.list_all()] == ["eng", "fra", "spa"]

    def test_unknown_installed_key_is_ignored(self, catalog_file):
        catalog = LanguageCatalog.from_file(catalog_file, ["eng", "zzz"])
        assert [lang.key for lang in catalog.list_installed()] == ["eng"]


class TestLookup:
    @pytest.mark.parametrize("key", ["eng", "fra"])
    def test_installed_key(self, catalog, key):
        language = catalog.lookup(key)
        assert language is not None
        assert language.key == key

    @pytest.mark.parametrize("key", ["", "en", "engl", "xyz", "ENG", "spa"])
    def test_not_found(self, catalog, key):
        assert catalog.lookup(key) is None


class TestReload:
    def test_picks_up_changes(self, catalog, catalog_file):
        catalog_file.write_text(
            json.dumps([{"key": "fra", "displayName": "Français"}]),
            encoding="utf-8",
        )
        catalog.reload()

        assert catalog.lookup("eng") is None
        assert catalog.lookup("fra").display_name == "Français"

    def test_failed_reload_keeps_previous(self, catalog, catalog_file):
        catalog_file.write_text("not json", encoding="utf-8")

        with pytest.raises(CatalogError):
            catalog.reload()

        assert catalog.lookup("eng") is not None

    def test_reload_without_file(self, catalog):
        in_memory = LanguageCatalog(catalog.list_all(), ["eng"])
        with pytest.raises(CatalogError):
            in_memory.reload()

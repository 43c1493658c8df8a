"""Tests for file and API descriptor providers."""

import logging
from unittest.mock import patch

import pytest
import yaml

from catalog.models import CaskDescriptor, FormulaDescriptor
from catalog.provider import ApiCatalog, FileCatalog, open_catalog
from constants import Constants, PackageKinds
from errors import CatalogConnectionError, CatalogError, UnknownPackageError
from resolution.platform import PlatformTag
from conftest import BAZ_DOCUMENT, FOO_DOCUMENT


class TestFileCatalog:
    """Catalogs backed by YAML/JSON files."""

    def test_loads_formula_and_cask(self, catalog_dir):
        catalog = FileCatalog(catalog_dir)
        assert isinstance(catalog.load("foo"), FormulaDescriptor)
        assert isinstance(catalog.load("bar"), FormulaDescriptor)
        assert isinstance(catalog.load("baz"), CaskDescriptor)

    def test_context_applies_variation(self, catalog_dir):
        cask = FileCatalog(catalog_dir).load("baz", PlatformTag("sonoma", "arm64"))
        assert cask.source.url.endswith("-arm.dmg")

    def test_unknown_name(self, catalog_dir):
        with pytest.raises(UnknownPackageError) as excinfo:
            FileCatalog(catalog_dir).load("nope")
        assert excinfo.value.name == "nope"
        assert "formula or cask" in str(excinfo.value)

    def test_kind_restriction(self, catalog_dir):
        with pytest.raises(UnknownPackageError) as excinfo:
            FileCatalog(catalog_dir).load("foo", kind=PackageKinds.CASK)
        assert "cask" in str(excinfo.value)

    def test_formula_wins_over_cask(self, tmp_path):
        path = tmp_path / "catalog.yml"
        same_name_cask = dict(BAZ_DOCUMENT, token="foo")
        path.write_text(yaml.safe_dump([same_name_cask, FOO_DOCUMENT]), encoding="utf-8")
        catalog = FileCatalog(path)
        assert catalog.load("foo").kind is PackageKinds.FORMULA
        assert catalog.load("foo", kind=PackageKinds.CASK).kind is PackageKinds.CASK

    def test_load_all_keeps_order(self, catalog_dir):
        names = [p.name for p in FileCatalog(catalog_dir).load_all(["baz", "foo"])]
        assert names == ["baz", "foo"]

    def test_duplicate_keeps_first(self, tmp_path, caplog):
        path = tmp_path / "catalog.yml"
        second = dict(FOO_DOCUMENT, versions={"stable": "9.9"})
        path.write_text(yaml.safe_dump([FOO_DOCUMENT, second]), encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            formula = FileCatalog(path).load("foo")
        assert formula.version == "1.2.3"
        assert "Duplicate" in caplog.text

    def test_missing_path(self, tmp_path):
        with pytest.raises(CatalogError):
            FileCatalog(tmp_path / "absent").load("foo")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("name: [unclosed\n", encoding="utf-8")
        with pytest.raises(CatalogError):
            FileCatalog(path).load("foo")

    def test_scalar_file(self, tmp_path):
        path = tmp_path / "scalar.yml"
        path.write_text("just a string\n", encoding="utf-8")
        with pytest.raises(CatalogError):
            FileCatalog(path).load("foo")

    def test_invalid_document_surfaces_on_load(self, tmp_path):
        path = tmp_path / "catalog.yml"
        path.write_text(yaml.safe_dump({"name": "foo"}), encoding="utf-8")
        with pytest.raises(CatalogError):
            FileCatalog(path).load("foo")


class TestApiCatalog:
    """Catalog fetched from the JSON API."""

    @patch("catalog.provider.get_json")
    def test_fetches_formula(self, mock_get_json):
        mock_get_json.return_value = (200, {}, dict(FOO_DOCUMENT))
        catalog = ApiCatalog("https://api.example.com/")
        formula = catalog.load("foo")
        assert formula.name == "foo"
        mock_get_json.assert_called_once_with("https://api.example.com/formula/foo.json")

    @patch("catalog.provider.get_json")
    def test_falls_back_to_cask(self, mock_get_json):
        mock_get_json.side_effect = [(404, {}, None), (200, {}, dict(BAZ_DOCUMENT))]
        cask = ApiCatalog("https://api.example.com").load("baz")
        assert cask.kind is PackageKinds.CASK
        urls = [c.args[0] for c in mock_get_json.call_args_list]
        assert urls == ["https://api.example.com/formula/baz.json", "https://api.example.com/cask/baz.json"]

    @patch("catalog.provider.get_json")
    def test_documents_are_memoised(self, mock_get_json):
        mock_get_json.return_value = (200, {}, dict(FOO_DOCUMENT))
        catalog = ApiCatalog("https://api.example.com")
        catalog.load("foo", PlatformTag("linux", "x86_64"))
        catalog.load("foo", PlatformTag("sonoma", "arm64"))
        assert mock_get_json.call_count == 1

    @patch("catalog.provider.get_json")
    def test_unknown_everywhere(self, mock_get_json):
        mock_get_json.return_value = (404, {}, None)
        with pytest.raises(UnknownPackageError):
            ApiCatalog("https://api.example.com").load("nope")

    @patch("catalog.provider.get_json")
    def test_connection_failure(self, mock_get_json):
        mock_get_json.return_value = (0, {}, None)
        with pytest.raises(CatalogConnectionError):
            ApiCatalog("https://api.example.com").load("foo")

    @patch("catalog.provider.get_json")
    def test_server_error(self, mock_get_json):
        mock_get_json.return_value = (403, {}, None)
        with pytest.raises(CatalogError):
            ApiCatalog("https://api.example.com").load("foo")

    @patch("catalog.provider.get_json")
    def test_non_object_body(self, mock_get_json):
        mock_get_json.return_value = (200, {}, None)
        with pytest.raises(CatalogError):
            ApiCatalog("https://api.example.com").load("foo")


class TestOpenCatalog:
    """Choosing a provider from a location string."""

    def test_default_is_api(self):
        catalog = open_catalog(None)
        assert isinstance(catalog, ApiCatalog)
        assert catalog.base_url == Constants.DEFAULT_API_URL

    def test_url(self):
        assert isinstance(open_catalog("http://localhost:8080/api"), ApiCatalog)

    def test_path(self, catalog_dir):
        assert isinstance(open_catalog(str(catalog_dir)), FileCatalog)

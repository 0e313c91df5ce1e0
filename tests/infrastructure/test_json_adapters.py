"""Tests for the read-only JSON catalog and user directory."""

import json

import pytest

from resale.domain.exceptions import StorageError
from resale.domain.model.value_objects import Money
from resale.infrastructure.persistence.json_catalog import JsonCatalog
from resale.infrastructure.persistence.json_user_directory import JsonUserDirectory


@pytest.fixture
def products_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(
        json.dumps([
            {"id": "P1", "title": "Denim jacket", "price": "35.00", "seller_id": "u2",
             "condition": "Like New"},
            {"id": 7, "title": "Desk lamp", "price": 12.5, "seller_id": 3,
             "is_available": False},
        ]),
        encoding="utf-8",
    )
    return path


class TestJsonCatalog:

    def test_reads_products(self, products_file):
        catalog = JsonCatalog(products_file)
        jacket = catalog.get_product("P1")
        assert jacket.price == Money.of("35.00")
        assert jacket.condition == "Like New"
        assert jacket.is_available is True

    def test_ids_are_normalised_to_strings(self, products_file):
        lamp = JsonCatalog(products_file).get_product("7")
        assert lamp.seller_id == "3"
        assert lamp.price == Money.of("12.5")
        assert lamp.is_available is False
        assert lamp.condition == "Good"

    def test_unknown_product(self, products_file):
        assert JsonCatalog(products_file).get_product("nope") is None

    def test_sees_file_changes(self, products_file):
        catalog = JsonCatalog(products_file)
        assert len(catalog.list_products()) == 2
        products_file.write_text("[]", encoding="utf-8")
        assert catalog.list_products() == []

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonCatalog(tmp_path / "missing.json").list_products() == []

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(StorageError, match="Cannot read catalog"):
            JsonCatalog(path).get_product("P1")

    @pytest.mark.parametrize(
        "record",
        [
            {"id": "P1", "price": "abc", "seller_id": "s1"},
            {"id": "P1", "price": "-5", "seller_id": "s1"},
            {"id": "P1", "price": "5.00"},
            {"price": "5.00", "seller_id": "s1"},
            "P1",
        ],
    )
    def test_malformed_record(self, tmp_path, record):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([record]), encoding="utf-8")
        with pytest.raises(StorageError, match="Malformed product"):
            JsonCatalog(path).list_products()


class TestJsonUserDirectory:

    def test_looks_up_username(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"id": 1, "username": "maria"}]), encoding="utf-8")
        users = JsonUserDirectory(path)
        assert users.get_username("1") == "maria"
        assert users.get_username("2") is None

    def test_malformed_record(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"username": "maria"}]), encoding="utf-8")
        with pytest.raises(StorageError, match="Malformed user"):
            JsonUserDirectory(path).get_username("1")

    def test_missing_file(self, tmp_path):
        assert JsonUserDirectory(tmp_path / "users.json").get_username("1") is None

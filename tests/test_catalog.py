from decimal import Decimal

import pytest

from supermarket_sim.catalog import Catalog, ProductRecord, classify, load_catalog, summarize_by_name, summarize_by_serial
from supermarket_sim.exceptions import CatalogError
from supermarket_sim.world.layout import load_layout

from conftest import make_product


def test_classify_uses_first_three_characters():
    assert classify("ALC001") == "ALC"
    assert classify("FRU") == "FRU"
    assert classify("AB") == ""
    assert classify("") == ""


def test_product_flags():
    beer = make_product("ALC001", consumable=True, beverage=True)
    apple = make_product("FRU001", consumable=True)
    soap = make_product("CLE001")

    assert beer.is_alcohol and not beer.is_food
    assert apple.is_food and not apple.is_alcohol
    assert not soap.is_food and not soap.is_beverage
    assert str(make_product("BRD001", "Bread", "85")) == "Bread (PHP 85.00)"


def test_bundled_catalog_loads():
    catalog = load_catalog()

    assert len(catalog) == 78
    beer = catalog.get("alc001")
    assert beer is not None
    assert beer.name == "Pale Pilsen"
    assert beer.price == Decimal("60.00")
    assert beer.is_beverage and beer.is_consumable
    assert [p.serial for p in catalog.by_prefix("CHK")] == ["CHK001", "CHK002", "CHK003"]
    assert "ALC" in catalog.prefixes()


def test_record_normalizes_serial_and_float_price():
    record = ProductRecord(serial=" fru001 ", name="Apple", price=12.1, consumable=True)
    product = record.to_product()

    assert product.serial == "FRU001"
    assert product.price == Decimal("12.1")
    assert product.is_food


def test_invalid_record_raises_catalog_error():
    with pytest.raises(CatalogError) as exc:
        Catalog.from_records([{"serial": "FRU001", "name": "Apple", "price": "-1"}])
    assert "#0" in str(exc.value)


def test_duplicate_serial_rejected():
    with pytest.raises(CatalogError):
        Catalog.from_records(
            [
                {"serial": "FRU001", "name": "Apple", "price": "30"},
                {"serial": "fru001", "name": "Green Apple", "price": "35"},
            ]
        )


def test_load_catalog_from_path(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "products:\n"
        "  - {serial: SNK001, name: Chips, price: '40.00', consumable: true}\n"
        "  - {serial: CLE001, name: Soap, price: 50}\n",
        encoding="utf-8",
    )
    catalog = load_catalog(path)

    assert [p.serial for p in catalog] == ["SNK001", "CLE001"]
    assert catalog.get("CLE001").price == Decimal("50")


def test_summaries_key_by_name_or_serial():
    # same name, different serials
    a = make_product("BRD001", "Bread", "85.00")
    b = make_product("BRD002", "Bread", "85.00")
    c = make_product("FRU001", "Apple", "30.00")

    by_name = summarize_by_name([a, c, b, a])
    by_serial = summarize_by_serial([a, c, b, a])

    assert [(r.name, r.quantity) for r in by_name] == [("Bread", 3), ("Apple", 1)]
    assert all(r.serial == "N/A" for r in by_name)
    assert [(r.serial, r.quantity) for r in by_serial] == [("BRD001", 2), ("FRU001", 1), ("BRD002", 1)]
    assert by_serial[0].total == Decimal("170.00")


def test_every_stocked_class_has_three_variants():
    catalog = load_catalog()
    stocked = {zone.prefix for plan in load_layout().floors for zone in plan.zones}

    assert stocked
    for prefix in sorted(stocked):
        assert len(catalog.by_prefix(prefix)) >= 3, prefix


def test_malformed_catalog_file_raises_catalog_error(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text('products:\n  - {serial: EGG003, name: "Salted\n', encoding="utf-8")

    with pytest.raises(CatalogError) as exc:
        load_catalog(path)
    assert str(path) in str(exc.value)

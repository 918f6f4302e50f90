"""
Tests for JSON Schema Contract Validators

Тестирование контрактов salekit:
- Валидность самих схем
- Валидация правильных документов каталога и чеков
- Детекция нарушений required полей, типов и patterns
- Загрузка каталога в продажу (load_catalog)
"""

import json
from pathlib import Path

import pytest
from jsonschema import Draft202012Validator, ValidationError

from salekit.catalog import load_catalog, parse_catalog
from salekit.core.contracts import (
    CatalogValidator,
    PurchaseReceiptValidator,
    SchemaLoader,
    validate_catalog,
    validate_purchase_receipt,
)
from salekit.core.domain import (
    PRICE_CONVERT_VIA_ORACLE,
    PRICE_SWAP_VIA_ORACLE,
    SUPPLY_UNLIMITED,
    FixedPrice,
    OracleConvertedPrice,
    OracleSwappedPrice,
    sku_key,
)
from salekit.core.errors import AccessError, ConfigurationError
from salekit.oracle import OracleSwapSale
from salekit.sale import SaleConfig
from tests.fakes import (
    OTHER_TOKEN,
    OWNER,
    PAYOUT,
    RECEIVER,
    REFERENCE_TOKEN,
    STRANGER,
    InMemoryCurrency,
    MockOracle,
)


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_catalog():
    """Валидный документ каталога."""
    return {
        "skus": [
            {
                "sku": "ticket",
                "total_supply": 100,
                "max_quantity_per_purchase": 5,
                "notifications_receiver": RECEIVER,
                "prices": {REFERENCE_TOKEN: 1000, OTHER_TOKEN: "oracle"},
            },
            {
                "sku": "pass",
                "total_supply": "unlimited",
                "max_quantity_per_purchase": "10",
                "prices": {REFERENCE_TOKEN: "250000000000000000000", OTHER_TOKEN: "swap"},
            },
        ]
    }


@pytest.fixture
def valid_receipt():
    """Валидный сериализованный чек."""
    return {
        "purchaser": "0xb2",
        "recipient": "0xc3",
        "token": REFERENCE_TOKEN,
        "sku": "0x736b75",
        "quantity": "1",
        "user_data": "0x",
        "total_price": "1000",
        "ext_data": [str(PRICE_CONVERT_VIA_ORACLE), "2000000000000000000"],
        "lifecycle_path": 31,
    }


@pytest.fixture
def sale():
    currencies = {REFERENCE_TOKEN: InMemoryCurrency(), OTHER_TOKEN: InMemoryCurrency()}
    return OracleSwapSale(
        OWNER,
        SaleConfig(payout_wallet=PAYOUT, reference_token=REFERENCE_TOKEN, skus_capacity=2),
        currencies=currencies,
        oracle=MockOracle(currencies),
    )


# =============================================================================
# SCHEMAS
# =============================================================================


class TestSchemaLoader:
    @pytest.mark.parametrize("schema_name", ["catalog", "purchase_receipt"])
    def test_schemas_are_valid(self, schema_name):
        schema = SchemaLoader().load_schema(schema_name)

        Draft202012Validator.check_schema(schema)

    def test_schemas_shipped_with_package(self):
        schema_dir = Path(SchemaLoader().schema_dir)

        for name in ("catalog.json", "purchase_receipt.json"):
            with open(schema_dir / name) as f:
                assert json.load(f)["$schema"].endswith("2020-12/schema")


class TestCatalogContract:
    def test_valid_catalog(self, valid_catalog):
        validate_catalog(valid_catalog)
        CatalogValidator().validate(valid_catalog)

    def test_missing_required_field(self, valid_catalog):
        del valid_catalog["skus"][0]["max_quantity_per_purchase"]

        with pytest.raises(ValidationError, match="max_quantity_per_purchase"):
            validate_catalog(valid_catalog)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("total_supply", -1),
            ("total_supply", "infinite"),
            ("sku", ""),
            ("sku", "x" * 33),
            ("prices", {REFERENCE_TOKEN: "auction"}),
            ("prices", {REFERENCE_TOKEN: 1.5}),
            ("color", "red"),
        ],
    )
    def test_invalid_values(self, valid_catalog, field, value):
        valid_catalog["skus"][0][field] = value

        with pytest.raises(ValidationError):
            CatalogValidator().validate(valid_catalog)


class TestPurchaseReceiptContract:
    def test_valid_receipt(self, valid_receipt):
        validate_purchase_receipt(valid_receipt)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("quantity", "0"),
            ("quantity", 1),
            ("sku", "sku"),
            ("user_data", "0x1"),
            ("ext_data", [1]),
            ("lifecycle_path", 32),
        ],
    )
    def test_invalid_values(self, valid_receipt, field, value):
        valid_receipt[field] = value

        with pytest.raises(ValidationError) as exc_info:
            PurchaseReceiptValidator().validate(valid_receipt)

        assert exc_info.value.path[0] == field


# =============================================================================
# CATALOG LOADER
# =============================================================================


class TestLoadCatalog:
    def test_parse_keywords_and_strings(self, valid_catalog):
        ticket, pass_ = parse_catalog(valid_catalog)

        assert ticket.sku == sku_key("ticket")
        assert ticket.prices == (1000, PRICE_CONVERT_VIA_ORACLE)
        assert pass_.total_supply == SUPPLY_UNLIMITED
        assert pass_.max_quantity_per_purchase == 10
        assert pass_.prices == (250 * 10**18, PRICE_SWAP_VIA_ORACLE)

    def test_load_creates_priced_skus(self, sale, valid_catalog):
        created = load_catalog(sale, valid_catalog, sender=OWNER)

        assert [record.name for record in created] == ["ticket", "pass"]
        assert sale.get_skus() == (sku_key("ticket"), sku_key("pass"))

        ticket = sale.get_sku_info(sku_key("ticket"))
        assert ticket.notifications_receiver == RECEIVER
        assert ticket.price_for(REFERENCE_TOKEN) == FixedPrice(amount=1000)
        assert ticket.price_for(OTHER_TOKEN) == OracleConvertedPrice()

        pass_ = sale.get_sku_info(sku_key("pass"))
        assert pass_.is_unlimited()
        assert pass_.price_for(OTHER_TOKEN) == OracleSwappedPrice()

    def test_invalid_document_changes_nothing(self, sale, valid_catalog):
        valid_catalog["skus"][1]["total_supply"] = "lots"

        with pytest.raises(ConfigurationError) as exc_info:
            load_catalog(sale, valid_catalog, sender=OWNER)

        assert exc_info.value.reason == "invalid_catalog"
        assert sale.get_skus() == ()

    def test_out_of_range_number(self, sale, valid_catalog):
        valid_catalog["skus"][0]["total_supply"] = "9" * 78

        with pytest.raises(ConfigurationError, match="out of uint256 range"):
            load_catalog(sale, valid_catalog, sender=OWNER)

        assert sale.get_skus() == ()

    def test_multibyte_name_too_long(self, sale, valid_catalog):
        valid_catalog["skus"][0]["sku"] = "й" * 17

        with pytest.raises(ConfigurationError, match="exceeds 32 bytes"):
            load_catalog(sale, valid_catalog, sender=OWNER)

    def test_ledger_rules_apply(self, sale, valid_catalog):
        valid_catalog["skus"][0]["prices"] = {OTHER_TOKEN: 5}

        with pytest.raises(ConfigurationError, match="no reference token"):
            load_catalog(sale, valid_catalog, sender=OWNER)

    def test_owner_only(self, sale, valid_catalog):
        with pytest.raises(AccessError, match="not the owner"):
            load_catalog(sale, valid_catalog, sender=STRANGER)

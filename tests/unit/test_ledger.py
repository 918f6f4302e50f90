"""Тесты для Inventory Ledger.

Coverage:
- Создание SKU: дубликаты, ёмкость, нулевое предложение, max quantity
- Прайс-листы: порядок, удаление, reference-валюта, ёмкость
- Учёт остатка: списание, возврат, пополнение
"""

import pytest

from salekit.catalog.ledger import InventoryLedger
from salekit.core.domain import (
    PRICE_CONVERT_VIA_ORACLE,
    PRICE_SWAP_VIA_ORACLE,
    SUPPLY_UNLIMITED,
    ZERO_ADDRESS,
    FixedPrice,
    OracleConvertedPrice,
    OracleSwappedPrice,
    sku_key,
)
from salekit.core.errors import ConfigurationError, DeliveryError, PurchaseValidationError

REF = "0x000000000000000000000000000000000000da1a"
TOKEN_A = "0x000000000000000000000000000000000000000a"
TOKEN_B = "0x000000000000000000000000000000000000000b"
TOKEN_C = "0x000000000000000000000000000000000000000c"

SKU = sku_key("sku")


@pytest.fixture
def ledger():
    return InventoryLedger(reference_token=REF, skus_capacity=2, tokens_per_sku_capacity=3)


@pytest.fixture
def priced_ledger(ledger):
    ledger.create_sku(SKU, 3, 2)
    ledger.set_token_prices(SKU, [REF, TOKEN_A], [1000, 50])
    return ledger


class TestLedgerConstruction:
    def test_zero_reference_token_rejected(self):
        with pytest.raises(ConfigurationError, match="zero address reference token"):
            InventoryLedger(reference_token=ZERO_ADDRESS, skus_capacity=1, tokens_per_sku_capacity=1)

    @pytest.mark.parametrize("skus_capacity, tokens_capacity", [(0, 1), (1, 0)])
    def test_capacities_must_be_positive(self, skus_capacity, tokens_capacity):
        with pytest.raises(ConfigurationError) as exc_info:
            InventoryLedger(REF, skus_capacity, tokens_capacity)

        assert exc_info.value.reason == "invalid_capacity"


class TestCreateSku:
    def test_new_sku_has_full_supply_and_no_prices(self, ledger):
        record = ledger.create_sku(SKU, 3, 2)

        assert record.total_supply == 3
        assert record.remaining_supply == 3
        assert record.max_quantity_per_purchase == 2
        assert record.prices == ()
        assert record.notifications_receiver is None
        assert ledger.get_sku(SKU) == record
        assert ledger.contains(SKU)

    def test_duplicate_rejected(self, ledger):
        ledger.create_sku(SKU, 3, 2)

        with pytest.raises(ConfigurationError, match="Sale: sku already created"):
            ledger.create_sku(SKU, 5, 1)

    def test_capacity_exceeded(self, ledger):
        ledger.create_sku(sku_key("one"), 1, 1)
        ledger.create_sku(sku_key("two"), 1, 1)

        with pytest.raises(ConfigurationError, match="too many skus"):
            ledger.create_sku(sku_key("three"), 1, 1)

    def test_zero_supply_rejected(self, ledger):
        with pytest.raises(ConfigurationError, match="zero supply"):
            ledger.create_sku(SKU, 0, 1)

    @pytest.mark.parametrize("max_quantity", [0, 4])
    def test_invalid_max_quantity(self, ledger, max_quantity):
        with pytest.raises(ConfigurationError, match="invalid quantity"):
            ledger.create_sku(SKU, 3, max_quantity)

    def test_zero_receiver_means_no_receiver(self, ledger):
        record = ledger.create_sku(SKU, 3, 2, ZERO_ADDRESS)

        assert record.notifications_receiver is None

    def test_keys_in_creation_order(self, ledger):
        ledger.create_sku(sku_key("b"), 1, 1)
        ledger.create_sku(sku_key("a"), 1, 1)

        assert ledger.sku_keys() == (sku_key("b"), sku_key("a"))
        assert len(ledger) == 2

    def test_unknown_sku(self, ledger):
        with pytest.raises(PurchaseValidationError, match="non-existent sku"):
            ledger.get_sku(SKU)


class TestSetTokenPrices:
    def test_prices_stored_in_order(self, priced_ledger):
        record = priced_ledger.get_sku(SKU)

        assert record.tokens() == (REF, TOKEN_A)
        assert record.price_for(TOKEN_A) == FixedPrice(amount=50)

    def test_update_in_place_and_append(self, priced_ledger):
        record = priced_ledger.set_token_prices(SKU, [TOKEN_B, TOKEN_A], [7, 60])

        assert record.tokens() == (REF, TOKEN_A, TOKEN_B)
        assert record.price_for(TOKEN_A) == FixedPrice(amount=60)

    def test_zero_price_removes_entry(self, priced_ledger):
        record = priced_ledger.set_token_prices(SKU, [TOKEN_A], [0])

        assert record.tokens() == (REF,)

    def test_removing_everything_is_allowed(self, priced_ledger):
        record = priced_ledger.set_token_prices(SKU, [TOKEN_A, REF], [0, 0])

        assert record.prices == ()

    def test_removing_reference_token_rejected(self, priced_ledger):
        with pytest.raises(ConfigurationError, match="no reference token"):
            priced_ledger.set_token_prices(SKU, [REF], [0])

        assert priced_ledger.get_sku(SKU).tokens() == (REF, TOKEN_A)

    def test_price_list_without_reference_token_rejected(self, ledger):
        ledger.create_sku(SKU, 3, 2)

        with pytest.raises(ConfigurationError, match="no reference token"):
            ledger.set_token_prices(SKU, [TOKEN_A], [10])

    def test_lengths_mismatch(self, priced_ledger):
        with pytest.raises(ConfigurationError, match="tokens/prices lengths mismatch"):
            priced_ledger.set_token_prices(SKU, [TOKEN_A, TOKEN_B], [1])

    def test_zero_address_token(self, priced_ledger):
        with pytest.raises(ConfigurationError, match="zero address token"):
            priced_ledger.set_token_prices(SKU, [ZERO_ADDRESS], [1])

    def test_too_many_tokens(self, priced_ledger):
        priced_ledger.set_token_prices(SKU, [TOKEN_B], [1])

        with pytest.raises(ConfigurationError, match="too many tokens"):
            priced_ledger.set_token_prices(SKU, [TOKEN_C], [1])

    def test_markers_stored_as_oracle_entries(self, priced_ledger):
        record = priced_ledger.set_token_prices(
            SKU, [TOKEN_A, TOKEN_B], [PRICE_CONVERT_VIA_ORACLE, PRICE_SWAP_VIA_ORACLE]
        )

        assert record.price_for(TOKEN_A) == OracleConvertedPrice()
        assert record.price_for(TOKEN_B) == OracleSwappedPrice()

    def test_entry_objects_accepted(self, priced_ledger):
        record = priced_ledger.set_token_prices(SKU, [TOKEN_A], [OracleConvertedPrice()])

        assert record.price_for(TOKEN_A) == OracleConvertedPrice()

    def test_invalid_price_value(self, priced_ledger):
        with pytest.raises(ConfigurationError) as exc_info:
            priced_ledger.set_token_prices(SKU, [TOKEN_A], [-1])

        assert exc_info.value.reason == "invalid_price"

    def test_unknown_sku(self, ledger):
        with pytest.raises(PurchaseValidationError, match="non-existent sku"):
            ledger.set_token_prices(SKU, [REF], [1])


class TestSupplyBookkeeping:
    def test_decrease_and_restore(self, priced_ledger):
        assert priced_ledger.decrease_remaining_supply(SKU, 2).remaining_supply == 1
        assert priced_ledger.restore_remaining_supply(SKU, 2).remaining_supply == 3

    def test_restore_capped_at_total(self, priced_ledger):
        assert priced_ledger.restore_remaining_supply(SKU, 10).remaining_supply == 3

    def test_decrease_beyond_remaining(self, priced_ledger):
        with pytest.raises(DeliveryError, match="insufficient supply"):
            priced_ledger.decrease_remaining_supply(SKU, 4)

    def test_unlimited_supply_never_decreases(self, ledger):
        ledger.create_sku(SKU, SUPPLY_UNLIMITED, 10)

        record = ledger.decrease_remaining_supply(SKU, 10)

        assert record.remaining_supply == SUPPLY_UNLIMITED

    def test_increase_supply(self, priced_ledger):
        priced_ledger.decrease_remaining_supply(SKU, 1)

        record = priced_ledger.increase_supply(SKU, 5)

        assert record.total_supply == 8
        assert record.remaining_supply == 7

    def test_increase_unlimited_rejected(self, ledger):
        ledger.create_sku(SKU, SUPPLY_UNLIMITED, 10)

        with pytest.raises(ConfigurationError, match="cannot increase unlimited supply"):
            ledger.increase_supply(SKU, 1)

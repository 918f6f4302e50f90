"""
JSON Schema Contract Validators

Модуль для валидации JSON документов согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema (Draft 2020-12).

Схемы (поставляются внутри пакета, schema/):
- catalog.json: документ каталога SKU для load_catalog
- purchase_receipt.json: сериализованный PurchaseReceipt
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'catalog')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема сама по себе невалидна
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор документа против одной схемы контракта."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.validator = Draft202012Validator(_SCHEMA_LOADER.load_schema(schema_name))

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Поднимается наиболее релевантное нарушение (jsonschema best_match);
        для oneOf / anyOf выбирается ошибка из подходящей ветки.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        error = best_match(self.validator.iter_errors(data))
        if error is not None:
            raise error


class CatalogValidator(ContractValidator):
    def __init__(self):
        super().__init__("catalog")


class PurchaseReceiptValidator(ContractValidator):
    def __init__(self):
        super().__init__("purchase_receipt")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_catalog(data: Dict[str, Any]) -> None:
    """
    Валидация документа каталога.

    Raises:
        ValidationError: Если документ не соответствует схеме
    """
    CatalogValidator().validate(data)


def validate_purchase_receipt(data: Dict[str, Any]) -> None:
    """
    Валидация сериализованного чека покупки.

    Raises:
        ValidationError: Если документ не соответствует схеме
    """
    PurchaseReceiptValidator().validate(data)

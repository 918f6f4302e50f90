"""
Errors — иерархия исключений движка продаж

Каждое исключение несёт машинно-читаемый код причины (``reason``) и
человеко-читаемое сообщение в формате ``"Sale: <text>"``.

Классы соответствуют этапам, на которых ошибка обнаружена:
- ConfigurationError: административные вызовы (дубликаты, ёмкость, reference token)
- AccessError: вызов административной операции не владельцем
- PurchaseValidationError: этап validation (paused, quantity, supply)
- PricingError: этап pricing (undefined price / rate, cannot estimate)
- PaymentError: этап payment (insufficient funds, transfer / swap failed)
- DeliveryError: этап delivery (allocator исчерпан)
- NotificationError: отказ получателя уведомления
- ReentrancyError: повторный вход в pipeline во время запроса
- ArithmeticOverflow: выход за границы uint256

Ни одна ошибка не повторяется автоматически.
"""


class SaleError(Exception):
    """Базовая ошибка движка продаж."""

    def __init__(self, reason: str, message: str | None = None):
        """
        Args:
            reason: код причины в snake_case (например, "undefined_rate")
            message: текст без префикса (default: reason с пробелами)
        """
        self.reason = reason
        text = message if message is not None else reason.replace("_", " ")
        super().__init__(f"Sale: {text}")


class ConfigurationError(SaleError):
    pass


class AccessError(SaleError):
    pass


class PurchaseValidationError(SaleError):
    pass


class PricingError(SaleError):
    pass


class PaymentError(SaleError):
    pass


class DeliveryError(SaleError):
    pass


class NotificationError(SaleError):
    pass


class ReentrancyError(SaleError):
    pass


class ArithmeticOverflow(SaleError):
    """
    Результат арифметики вышел за пределы [0, 2**256 - 1].

    Цены, количества и курсы хранятся как uint256; любое переполнение
    прерывает запрос целиком.
    """

    def __init__(self, message: str):
        super().__init__("overflow", message)

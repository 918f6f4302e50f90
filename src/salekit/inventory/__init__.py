"""Inventory — выдача идентификаторов из упорядоченного списка."""

from .sequential import FixedOrderInventorySale, SequentialAllocator, SequentialDeliveryStage

__all__ = [
    "FixedOrderInventorySale",
    "SequentialAllocator",
    "SequentialDeliveryStage",
]

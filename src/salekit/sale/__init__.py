"""Sale — pipeline покупки из пяти этапов и жизненный цикл продажи.

- VALIDATION → PRICING → PAYMENT → DELIVERY → NOTIFICATION
- estimate_purchase: только VALIDATION + PRICING
- purchase_for: атомарно, с компенсацией завершённых этапов
"""

from .sale import Sale, SaleConfig, next_sale_address
from .stages import (
    DeliveryStage,
    NotificationStage,
    PaymentStage,
    PricingStage,
    Stage,
    StagePipeline,
    ValidationStage,
    default_pipeline,
)
from .state import SaleState, SaleStateMachine, SaleTransitionResult

__all__ = [
    # Orchestrator
    "next_sale_address",
    "Sale",
    "SaleConfig",
    # Stages
    "Stage",
    "ValidationStage",
    "PricingStage",
    "PaymentStage",
    "DeliveryStage",
    "NotificationStage",
    "StagePipeline",
    "default_pipeline",
    # State
    "SaleState",
    "SaleStateMachine",
    "SaleTransitionResult",
]

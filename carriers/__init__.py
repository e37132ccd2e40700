"""
Carriers domain package.

Public API:
- Capability contract: Carrier
- In-memory carrier: SimCarrier, CarrierStatus
- Idle registry: CarrierWaitingLine
- Errors: CarrierStateException, CarrierContractError
"""
from .models import (
    Carrier,
    CarrierContractError,
    CarrierStateException,
    CarrierStatus,
    SimCarrier,
    carrier_label,
)
from .waiting_line import CarrierWaitingLine

__all__ = [
    "Carrier",
    "CarrierContractError",
    "CarrierStateException",
    "CarrierStatus",
    "SimCarrier",
    "CarrierWaitingLine",
    "carrier_label",
]

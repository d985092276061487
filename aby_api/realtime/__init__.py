"""Real-time event broadcasting over WebSocket"""

from .manager import ConnectionManager, manager
from .gateways import (
    Gateway,
    requisition_gateway,
    stock_gateway,
    asset_gateway,
    recruitment_gateway,
    client_gateway,
    medicine_gateway,
    contract_gateway,
    laboratory_box_gateway,
    box_water_gateway,
    pond_water_gateway,
    pond_medication_gateway,
    egg_fish_medication_gateway,
)

__all__ = [
    "ConnectionManager",
    "manager",
    "Gateway",
    "requisition_gateway",
    "stock_gateway",
    "asset_gateway",
    "recruitment_gateway",
    "client_gateway",
    "medicine_gateway",
    "contract_gateway",
    "laboratory_box_gateway",
    "box_water_gateway",
    "pond_water_gateway",
    "pond_medication_gateway",
    "egg_fish_medication_gateway",
]

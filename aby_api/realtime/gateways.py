"""
Event gateways

Each CRUD module owns a gateway with a fixed set of event names. Endpoints
queue ``gateway.emit(event, payload)`` as a background task once their write
has committed; every connected socket receives ``{"event": ..., "data": ...}``.
"""
from typing import Any, FrozenSet, Iterable
import logging

from fastapi.encoders import jsonable_encoder

from .manager import ConnectionManager, manager

logger = logging.getLogger("aby_api.realtime")


class Gateway:
    def __init__(self, name: str, events: Iterable[str], connections: ConnectionManager = manager):
        self.name = name
        self.events: FrozenSet[str] = frozenset(events)
        self.connections = connections

    async def emit(self, event: str, payload: Any = None) -> int:
        if event not in self.events:
            raise ValueError(f"Unknown {self.name} event: {event}")

        message = {"event": event, "data": jsonable_encoder(payload)}
        delivered = await self.connections.broadcast(message)
        logger.debug(f"{self.name}.{event} delivered to {delivered} sockets")
        return delivered


requisition_gateway = Gateway(
    "stock-requests",
    [
        "requestCreated",
        "requestUpdated",
        "requestDeleted",
        "requestApproved",
        "requestRejected",
        "materialsIssued",
        "materialsReceived",
        "requestClosed",
    ],
)

stock_gateway = Gateway(
    "stock",
    [
        "categoryCreated",
        "categoryUpdated",
        "categoryDeleted",
        "stockInCreated",
        "stockInUpdated",
        "stockInDeleted",
    ],
)

asset_gateway = Gateway(
    "assets",
    [
        "assetCreated",
        "assetUpdated",
        "assetDeleted",
        "assetRequestCreated",
        "assetRequestUpdated",
        "assetRequestDeleted",
        "assetRequestStatusChanged",
    ],
)

recruitment_gateway = Gateway(
    "recruitment",
    [
        "jobCreated",
        "jobUpdated",
        "jobDeleted",
        "applicantCreated",
        "applicantUpdated",
        "applicantDeleted",
    ],
)

client_gateway = Gateway("clients", ["clientCreated", "clientUpdated", "clientDeleted"])

medicine_gateway = Gateway("medicines", ["medicineCreated", "medicineUpdated", "medicineDeleted"])

contract_gateway = Gateway("contracts", ["contractCreated", "contractUpdated", "contractDeleted"])

laboratory_box_gateway = Gateway(
    "laboratory-boxes",
    ["laboratoryBoxCreated", "laboratoryBoxUpdated", "laboratoryBoxDeleted"],
)

box_water_gateway = Gateway(
    "box-water-changes",
    ["waterChangeCreated", "waterChangeUpdated", "waterChangeDeleted"],
)

pond_water_gateway = Gateway(
    "pond-water-changes",
    ["pondWaterChangeCreated", "pondWaterChangeUpdated", "pondWaterChangeDeleted"],
)

pond_medication_gateway = Gateway(
    "pond-medications",
    ["pondMedicationCreated", "pondMedicationUpdated", "pondMedicationDeleted"],
)

egg_fish_medication_gateway = Gateway(
    "egg-fish-medications",
    ["eggFishMedication.create", "eggFishMedication.update", "eggFishMedication.delete"],
)

"""Gear API endpoints."""

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request

from gearmanager.api.schemas import (
    AddItemRequest,
    CharacterResponse,
    ContainerInfo,
    EncumbranceResponse,
    EquipRequest,
    GridRegionInfo,
    HotbarClearRequest,
    HotbarRequest,
    ItemDefinitionInfo,
    ItemInspectionResponse,
    ItemInstanceInfo,
    MoveRequest,
    MutationResponse,
    PlacementRequest,
    PlacementResponse,
    RotateRequest,
    StowRequest,
    UnequipRequest,
    WeaponInfo,
)
from gearmanager.core.character.models import Character
from gearmanager.core.character.stats import container_weight
from gearmanager.core.grid.placement import GridRegion
from gearmanager.core.item.models import ItemDefinition, ItemInstance
from gearmanager.core.item.registry import DefinitionRegistry
from gearmanager.core.logging import get_logger
from gearmanager.core.outcomes import MutationResult
from gearmanager.services.gear_service import CharacterNotFoundError, GearService

logger = get_logger(__name__)

router = APIRouter(prefix="/gear", tags=["gear"])


def get_gear_service(request: Request) -> GearService:
    """GearService instance (dependency injection)"""
    service: GearService = request.app.state.gear_service
    return service


def get_registry(request: Request) -> DefinitionRegistry:
    """DefinitionRegistry instance (dependency injection)"""
    registry: DefinitionRegistry = request.app.state.registry
    return registry


# === converters ===


def _region_info(region: GridRegion) -> GridRegionInfo:
    return GridRegionInfo(
        item_id=region.item_id,
        x=region.x,
        y=region.y,
        width=region.width,
        height=region.height,
        rotation=region.rotation,
    )


def _definition_info(definition: ItemDefinition) -> ItemDefinitionInfo:
    weapon = definition.weapon
    return ItemDefinitionInfo(
        definition_id=definition.definition_id,
        name=definition.name,
        category=definition.category.value,
        weight=definition.weight,
        grid_width=definition.grid_width,
        grid_height=definition.grid_height,
        cost=definition.cost,
        tech_level=definition.tech_level,
        legality_class=definition.legality_class,
        quality=definition.quality.value if definition.quality else None,
        description=definition.description,
        is_container=definition.is_container,
        container_width=definition.container_width,
        container_height=definition.container_height,
        container_max_weight=definition.container_max_weight,
        is_armor=definition.is_armor,
        damage_resistance=definition.damage_resistance,
        locations=[loc.value for loc in definition.locations],
        weapon=(
            WeaponInfo(
                damage=weapon.damage,
                reach=weapon.reach,
                parry=weapon.parry,
                bulk=weapon.bulk,
            )
            if weapon
            else None
        ),
    )


def _instance_info(item: ItemInstance) -> ItemInstanceInfo:
    return ItemInstanceInfo.model_validate(item.to_dict())


def _mutation_response(
    action: str, result: MutationResult, item_id: str | None = None
) -> MutationResponse:
    return MutationResponse(
        success=result.success,
        action=action,
        reason=result.reason.value if result.reason else None,
        message=result.message,
        conflicts=[_region_info(r) for r in result.conflicts],
        item_id=item_id,
    )


def _run(action: str, operation: Callable[[], MutationResult]) -> MutationResponse:
    try:
        result = operation()
    except CharacterNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Character not found: {e.args[0]}")
    return _mutation_response(action, result)


def _encumbrance_response(service: GearService, character_id: str) -> EncumbranceResponse:
    summary = service.get_encumbrance_summary(character_id)
    info = summary["encumbrance"]
    return EncumbranceResponse(
        total_weight=summary["total_weight"],
        basic_lift=summary["basic_lift"],
        level=info.level.value,
        multiplier=info.multiplier,
        move_modifier=info.move_modifier,
        dodge_modifier=info.dodge_modifier,
        percentage=summary["percentage"],
        effective_move=summary["effective_move"],
        effective_dodge=summary["effective_dodge"],
    )


def _require_character(service: GearService, character_id: str) -> Character:
    try:
        return service.get_character(character_id)
    except CharacterNotFoundError:
        raise HTTPException(status_code=404, detail=f"Character not found: {character_id}")


# === catalog ===


@router.get("/catalog", response_model=list[ItemDefinitionInfo])
def list_catalog(
    registry: DefinitionRegistry = Depends(get_registry),
) -> list[ItemDefinitionInfo]:
    return [_definition_info(d) for d in registry.get_all()]


# === character state ===


@router.get("/characters/{character_id}", response_model=CharacterResponse)
def get_character(
    character_id: str,
    service: GearService = Depends(get_gear_service),
) -> CharacterResponse:
    """Full inventory snapshot with derived stats."""
    character = _require_character(service, character_id)
    with service.locked(character_id):
        return _character_response(service, character)


def _character_response(service: GearService, character: Character) -> CharacterResponse:
    character_id = character.character_id
    containers = [
        ContainerInfo(
            container_id=c.container_id,
            name=c.name,
            grid_width=c.grid_width,
            grid_height=c.grid_height,
            container_type=c.container_type.value,
            max_weight=c.max_weight,
            weight=container_weight(c, service.get_definition),
            items=[_instance_info(i) for i in c.items],
        )
        for c in character.containers
    ]
    return CharacterResponse(
        character_id=character.character_id,
        name=character.name,
        strength=character.strength,
        dexterity=character.dexterity,
        intelligence=character.intelligence,
        health=character.health,
        containers=containers,
        equipped={loc.value: iid for loc, iid in character.equipped.items()},
        hotbar={slot: i.instance_id for slot, i in character.hotbar().items()},
        armor={
            loc.value: dr
            for loc, dr in service.get_armor_coverage(character_id).items()
        },
        encumbrance=_encumbrance_response(service, character_id),
    )


@router.get("/characters/{character_id}/encumbrance", response_model=EncumbranceResponse)
def get_encumbrance(
    character_id: str,
    service: GearService = Depends(get_gear_service),
) -> EncumbranceResponse:
    _require_character(service, character_id)
    return _encumbrance_response(service, character_id)


@router.get(
    "/characters/{character_id}/items/{item_id}/inspect",
    response_model=ItemInspectionResponse,
)
def inspect_item(
    character_id: str,
    item_id: str,
    service: GearService = Depends(get_gear_service),
) -> ItemInspectionResponse:
    _require_character(service, character_id)
    inspection = service.inspect_item(character_id, item_id)
    if inspection is None:
        raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")
    return ItemInspectionResponse(
        item=_instance_info(inspection.item),
        definition=(
            _definition_info(inspection.definition) if inspection.definition else None
        ),
        total_weight=inspection.total_weight,
        encumbrance_impact=inspection.encumbrance_impact,
        can_equip=inspection.can_equip,
        equip_locations=[loc.value for loc in inspection.equip_locations],
    )


# === placement ===


@router.post("/characters/{character_id}/validate", response_model=PlacementResponse)
def validate_placement(
    character_id: str,
    request: PlacementRequest,
    service: GearService = Depends(get_gear_service),
) -> PlacementResponse:
    """Placement preview while dragging. Never changes anything."""
    _require_character(service, character_id)
    if request.item_id is None and request.definition_id is None:
        raise HTTPException(
            status_code=400, detail="item_id or definition_id is required"
        )
    result = service.validate_placement(
        character_id,
        request.container_id,
        request.x,
        request.y,
        request.rotation,
        item_id=request.item_id,
        definition_id=request.definition_id,
    )
    return PlacementResponse(
        can_place=result.can_place,
        reason=result.reason.value if result.reason else None,
        conflicts=[_region_info(r) for r in result.conflicts],
    )


# === mutations ===


@router.post("/characters/{character_id}/items", response_model=MutationResponse)
def add_item(
    character_id: str,
    request: AddItemRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    try:
        result, item_id = service.add_item(
            character_id,
            request.definition_id,
            request.container_id,
            request.x,
            request.y,
            request.rotation,
            request.quantity,
        )
    except CharacterNotFoundError:
        raise HTTPException(status_code=404, detail=f"Character not found: {character_id}")
    return _mutation_response("add", result, item_id)


@router.delete("/characters/{character_id}/items/{item_id}", response_model=MutationResponse)
def remove_item(
    character_id: str,
    item_id: str,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run("remove", lambda: service.remove_item(character_id, item_id))


@router.post("/characters/{character_id}/move", response_model=MutationResponse)
def move_item(
    character_id: str,
    request: MoveRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run(
        "move",
        lambda: service.move(
            character_id,
            request.item_id,
            request.container_id,
            request.x,
            request.y,
            request.rotation,
        ),
    )


@router.post("/characters/{character_id}/rotate", response_model=MutationResponse)
def rotate_item(
    character_id: str,
    request: RotateRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run(
        "rotate", lambda: service.rotate(character_id, request.item_id, request.rotation)
    )


@router.post("/characters/{character_id}/stow", response_model=MutationResponse)
def stow_item(
    character_id: str,
    request: StowRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run(
        "stow", lambda: service.stow(character_id, request.item_id, request.host_id)
    )


@router.post("/characters/{character_id}/equip", response_model=MutationResponse)
def equip_item(
    character_id: str,
    request: EquipRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run(
        "equip", lambda: service.equip(character_id, request.item_id, request.location)
    )


@router.post("/characters/{character_id}/unequip", response_model=MutationResponse)
def unequip_item(
    character_id: str,
    request: UnequipRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run("unequip", lambda: service.unequip(character_id, request.location))


@router.post("/characters/{character_id}/hotbar", response_model=MutationResponse)
def assign_hotbar(
    character_id: str,
    request: HotbarRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run(
        "hotbar",
        lambda: service.assign_hotbar(character_id, request.item_id, request.slot),
    )


@router.post("/characters/{character_id}/hotbar/clear", response_model=MutationResponse)
def clear_hotbar(
    character_id: str,
    request: HotbarClearRequest,
    service: GearService = Depends(get_gear_service),
) -> MutationResponse:
    return _run("hotbar_clear", lambda: service.clear_hotbar(character_id, request.slot))

"""API request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from gearmanager.core.item.models import HitLocation


# === Request Schemas ===


class PlacementRequest(BaseModel):
    """Placement preview for an owned item or a catalog entry"""

    container_id: str
    x: int
    y: int
    rotation: int = 0
    item_id: Optional[str] = Field(None, description="Owned item being dragged")
    definition_id: Optional[str] = Field(None, description="Catalog entry being dragged")


class MoveRequest(BaseModel):
    item_id: str
    container_id: str
    x: int
    y: int
    rotation: int = 0


class AddItemRequest(BaseModel):
    definition_id: str
    container_id: str
    x: int
    y: int
    rotation: int = 0
    quantity: int = Field(1, ge=1)


class RotateRequest(BaseModel):
    item_id: str
    rotation: int


class StowRequest(BaseModel):
    item_id: str
    host_id: str


class EquipRequest(BaseModel):
    item_id: str
    location: HitLocation


class UnequipRequest(BaseModel):
    location: HitLocation


class HotbarRequest(BaseModel):
    item_id: str
    slot: int


class HotbarClearRequest(BaseModel):
    slot: int


# === Response Schemas ===


class GridRegionInfo(BaseModel):
    item_id: str
    x: int
    y: int
    width: int
    height: int
    rotation: int


class PlacementResponse(BaseModel):
    can_place: bool
    reason: Optional[str] = None
    conflicts: list[GridRegionInfo] = []


class MutationResponse(BaseModel):
    """Mutation outcome. success False means nothing changed."""

    success: bool
    action: str
    reason: Optional[str] = None
    message: str = ""
    conflicts: list[GridRegionInfo] = []
    item_id: Optional[str] = None


class WeaponInfo(BaseModel):
    damage: str
    reach: str = ""
    parry: str = ""
    bulk: str = ""


class ItemDefinitionInfo(BaseModel):
    definition_id: str
    name: str
    category: str
    weight: float
    grid_width: int
    grid_height: int
    cost: float = 0.0
    tech_level: Optional[int] = None
    legality_class: Optional[int] = None
    quality: Optional[str] = None
    description: str = ""
    is_container: bool = False
    container_width: Optional[int] = None
    container_height: Optional[int] = None
    container_max_weight: Optional[float] = None
    is_armor: bool = False
    damage_resistance: int = 0
    locations: list[str] = []
    weapon: Optional[WeaponInfo] = None


class ItemInstanceInfo(BaseModel):
    instance_id: str
    definition_id: str
    quantity: int
    grid_x: Optional[int] = None
    grid_y: Optional[int] = None
    rotation: int = 0
    equipped_location: Optional[str] = None
    hotbar_slot: Optional[int] = None
    contained_items: list["ItemInstanceInfo"] = []


ItemInstanceInfo.model_rebuild()


class ContainerInfo(BaseModel):
    container_id: str
    name: str
    grid_width: int
    grid_height: int
    container_type: str
    max_weight: Optional[float] = None
    weight: float
    items: list[ItemInstanceInfo] = []


class EncumbranceResponse(BaseModel):
    total_weight: float
    basic_lift: float
    level: str
    multiplier: float
    move_modifier: int
    dodge_modifier: int
    percentage: float
    effective_move: int
    effective_dodge: int


class CharacterResponse(BaseModel):
    character_id: str
    name: str
    strength: int
    dexterity: int
    intelligence: int
    health: int
    containers: list[ContainerInfo] = []
    equipped: dict[str, str] = {}
    hotbar: dict[int, str] = {}
    armor: dict[str, int] = {}
    encumbrance: EncumbranceResponse


class ItemInspectionResponse(BaseModel):
    item: ItemInstanceInfo
    definition: Optional[ItemDefinitionInfo] = None
    total_weight: float
    encumbrance_impact: float
    can_equip: bool
    equip_locations: list[str] = []

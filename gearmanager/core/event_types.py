"""Event type constants emitted by the gear service."""


class EventTypes:
    """Event type string constants"""

    # inventory
    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"
    ITEM_MOVED = "item_moved"
    ITEM_ROTATED = "item_rotated"
    ITEM_STOWED = "item_stowed"

    # equipment
    ITEM_EQUIPPED = "item_equipped"
    ITEM_UNEQUIPPED = "item_unequipped"
    HOTBAR_CHANGED = "hotbar_changed"

    # derived stats
    ENCUMBRANCE_CHANGED = "encumbrance_changed"

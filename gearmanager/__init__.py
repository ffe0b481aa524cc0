"""Gear Manager - volumetric grid inventory and encumbrance engine."""

"""Fixed maintenance policy values and the default item set."""

from typing import List, Tuple

# Width of the "due soon" warning band, in distance units
DUE_SOON_DISTANCE = 1000

# Most vehicles a garage can hold
MAX_VEHICLES = 3

# (name, interval) offered when setting up a new vehicle
DEFAULT_MAINTENANCE_ITEMS: List[Tuple[str, int]] = [
    ("Engine oil", 10000),
    ("Oil filter", 30000),
    ("Air filter", 20000),
    ("Fuel filter", 30000),
    ("Gearbox oil", 30000),
    ("Differential and transfer oil", 30000),
    ("Alignment, balancing and rotation", 10000),
]

"""healthsched placement.

Tier and resource selection for dequeued tasks.
"""

from healthsched.placement.engine import PlacementEngine, TierLoad
from healthsched.placement.fabric import ComputeFabric

__all__ = [
    "ComputeFabric",
    "PlacementEngine",
    "TierLoad",
]

"""Product as seen by the cart and checkout code.

Products are owned by the catalog, which lives outside this package.
Here they are read-only snapshots: availability and price are re-read
from the catalog whenever a decision depends on them.
"""

from __future__ import annotations

from dataclasses import dataclass

from resale.domain.model.value_objects import Money


@dataclass(frozen=True)
class Product:
    """A catalog listing.

    ``price`` is non-negative by construction (Money rejects negatives).
    ``title`` and ``condition`` are display-only.
    """

    id: str
    price: Money
    seller_id: str
    is_available: bool = True
    title: str = ""
    condition: str = "Good"

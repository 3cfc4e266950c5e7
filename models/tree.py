"""
models/tree.py
--------------
Domain model for a tree planted on a house's yard grid.
"""

from dataclasses import dataclass
from typing import Optional

MIN_COORD = 1
MAX_COORD = 255


@dataclass
class Tree:
    """
    Represents a tree growing (or fallen) at a house.

    Attributes:
        id: Database primary key (None for new records).
        species: Tree species, e.g. 'oak'.
        x: Absolute x coordinate on the yard grid.
        y: Absolute y coordinate on the yard grid.
        relative_location: Optional free-text description ('' when absent).
        fallen: True once a storm has brought the tree down.
    """
    species: str
    x: int
    y: int
    relative_location: str = ""
    fallen: bool = False
    id: Optional[int] = None

    def to_dict(self) -> dict:
        """JSON view; `relativeLocation` is omitted when empty."""
        data = {
            "id": self.id,
            "species": self.species,
            "x": self.x,
            "y": self.y,
            "fallen": self.fallen,
        }
        if self.relative_location:
            data["relativeLocation"] = self.relative_location
        return data

    def __str__(self) -> str:
        status = "fallen" if self.fallen else "standing"
        return f"#{self.id} {self.species} at ({self.x}, {self.y}) - {status}"

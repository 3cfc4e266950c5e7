"""
models/house.py
---------------
Domain model for a dwelling in the neighborhood.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class House:
    """
    Represents a house at a street address.

    Attributes:
        id: Database primary key (None for new records).
        address_one: First street address line.
        address_two: Optional second line ('' when absent).
        city: City name.
        state: State name or code.
        zip: Postal code.
    """
    address_one: str
    city: str
    state: str
    zip: str
    address_two: str = ""
    id: Optional[int] = None

    def to_dict(self) -> dict:
        """JSON view; `addressTwo` is omitted when empty."""
        data = {
            "id": self.id,
            "addressOne": self.address_one,
            "city": self.city,
            "state": self.state,
            "zip": self.zip,
        }
        if self.address_two:
            data["addressTwo"] = self.address_two
        return data

    def __str__(self) -> str:
        return f"#{self.id} {self.address_one}, {self.city}, {self.state} {self.zip}"

"""
models/ - Domain Models
=======================
Plain dataclasses for houses and trees. No database or HTTP code lives here.
"""

from models.house import House
from models.tree import Tree

__all__ = ["House", "Tree"]

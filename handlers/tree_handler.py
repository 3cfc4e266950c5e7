"""
handlers/tree_handler.py
------------------------
Lists, plants, and removes trees.
"""

from flask import Blueprint, jsonify

from handlers.common import (
    get_repo,
    optional_text,
    parse_id,
    read_json_object,
    require_house,
    require_text,
)
from models.tree import MAX_COORD, MIN_COORD, Tree
from utils.errors import ErrorKind, NeighborhoodError, validation_error
from utils.logger import get_logger

logger = get_logger(__name__)
tree_bp = Blueprint("trees", __name__)


def _coordinate(body: dict, key: str, label: str) -> int:
    value = body.get(key)
    # bool is an int subclass; JSON true/false is not a coordinate.
    if not isinstance(value, int) or isinstance(value, bool) or not MIN_COORD <= value <= MAX_COORD:
        raise validation_error(f"must specify {label} between {MIN_COORD}-{MAX_COORD}")
    return value


def _tree_from_body(body: dict) -> Tree:
    return Tree(
        species=require_text(body, "species", "species"),
        x=_coordinate(body, "x", "an x coordinate"),
        y=_coordinate(body, "y", "a y coordinate"),
        relative_location=optional_text(body, "relativeLocation", "relative location"),
    )


@tree_bp.route("/trees/<house_id>", methods=["GET"])
def get_trees_by_house(house_id: str):
    """List the trees growing at a house; 404 when the house is missing or bare."""
    hid = parse_id(house_id, "houseID")
    require_house(hid)

    trees = get_repo().list_trees(hid)
    if not trees:
        raise NeighborhoodError(ErrorKind.EMPTY_RESULT, f"no trees growing at house {hid}")
    return jsonify([t.to_dict() for t in trees])


@tree_bp.route("/trees/<house_id>", methods=["POST"])
def add_tree_by_house(house_id: str):
    """Plant a new tree at a house."""
    hid = parse_id(house_id, "houseID")
    require_house(hid)

    tree = _tree_from_body(read_json_object("Tree"))
    get_repo().add_tree(tree, hid)
    logger.info(f"Planted tree {tree} at house {hid}")
    return jsonify(tree.to_dict())


@tree_bp.route("/trees/<tree_id>", methods=["DELETE"])
def remove_tree(tree_id: str):
    """Remove a fallen tree, or complain that it is still standing."""
    tid = parse_id(tree_id, "treeID")

    repo = get_repo()
    if not repo.is_tree_fallen(tid):
        raise NeighborhoodError(ErrorKind.TREE_STANDING, "call us back when the Tree falls")

    repo.remove_tree(tid)
    logger.info(f"Removed fallen tree #{tid}")
    return "", 200, {"Content-Type": "application/json"}

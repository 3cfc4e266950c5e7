"""
handlers/storm_handler.py
-------------------------
Sends a storm through a house's yard.
"""

from flask import Blueprint, jsonify

from handlers.common import get_repo, parse_id, require_house
from utils.logger import get_logger

logger = get_logger(__name__)
storm_bp = Blueprint("storm", __name__)


@storm_bp.route("/storm/<house_id>", methods=["POST"])
def send_storm_by_house(house_id: str):
    """
    Fell one random tree at a house and return the house's trees afterwards.

    The follow-up listing runs outside the storm transaction, so it reflects
    whatever has been committed by the time it runs.
    """
    hid = parse_id(house_id, "houseID")
    require_house(hid)

    repo = get_repo()
    felled = repo.fell_random_tree(hid)
    logger.info(f"Storm damage at house {hid} committed: tree #{felled} felled")

    trees = repo.list_trees(hid)
    return jsonify([t.to_dict() for t in trees])

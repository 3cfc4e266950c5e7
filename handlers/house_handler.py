"""
handlers/house_handler.py
-------------------------
Lists houses and adds new ones.
"""

from flask import Blueprint, jsonify

from handlers.common import get_repo, optional_text, read_json_object, require_text
from models.house import House
from utils.errors import ErrorKind, NeighborhoodError
from utils.logger import get_logger

logger = get_logger(__name__)
house_bp = Blueprint("houses", __name__)


@house_bp.route("/houses", methods=["GET"])
def get_all_houses():
    """Return every house in the neighborhood; 404 when there are none."""
    houses = get_repo().list_houses()
    if not houses:
        raise NeighborhoodError(ErrorKind.EMPTY_RESULT, "no houses in the neighborhood")
    return jsonify([h.to_dict() for h in houses])


@house_bp.route("/houses", methods=["POST"])
def add_house():
    """Build a new house from a JSON body and return it with its id."""
    body = read_json_object("House")
    house = House(
        address_one=require_text(body, "addressOne", "address one"),
        address_two=optional_text(body, "addressTwo", "address two"),
        city=require_text(body, "city", "city"),
        state=require_text(body, "state", "state"),
        zip=require_text(body, "zip", "zip"),
    )
    get_repo().add_house(house)
    logger.info(f"Added house {house}")
    return jsonify(house.to_dict())

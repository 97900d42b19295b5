"""Sticker loot box endpoints.

These three routes answer with bare JSON bodies (no success envelope) so the
sticker album and loot box screens can consume them directly.
"""

import logging

from flask import jsonify
from flask_jwt_extended import jwt_required

from flowlingo.api import api_bp
from flowlingo.extensions import limiter
from flowlingo.schemas import CheckLootBoxRequest, OpenLootBoxRequest, parse_body
from flowlingo.services.loot_box import should_award
from flowlingo.services.sticker_service import StickerService
from flowlingo.utils.auth import current_user_id

logger = logging.getLogger(__name__)


@api_bp.route("/stickers/catalog", methods=["GET"])
@jwt_required()
def get_sticker_catalog():
    """All stickers with the user's ``collected`` flag and ``count``."""
    return jsonify(StickerService().get_catalog_with_status(current_user_id()))


@api_bp.route("/stickers/open-lootbox", methods=["POST"])
@jwt_required()
@limiter.limit("10 per minute")
def open_lootbox():
    """
    Open a loot box and add its stickers to the collection.

    Request body:
    {
        "event": "level_complete"  // optional, defaults to "manual_open"
    }
    """
    body, error = parse_body(OpenLootBoxRequest)
    if error:
        return error

    user_id = current_user_id()
    stickers = StickerService().open_loot_box(user_id, body.event)

    logger.info(
        f"User {user_id} opened a loot box ({body.event}): "
        f"{', '.join(s['id'] for s in stickers)}"
    )
    return jsonify(
        {
            "success": True,
            "stickers": stickers,
            "message": f"You got {len(stickers)} new sticker(s)!",
        }
    )


@api_bp.route("/stickers/check-lootbox", methods=["POST"])
@jwt_required()
def check_lootbox():
    """Whether an event earns a loot box. ``event`` is required."""
    body, error = parse_body(CheckLootBoxRequest)
    if error:
        return error

    return jsonify({"shouldAward": should_award(body.event), "event": body.event})

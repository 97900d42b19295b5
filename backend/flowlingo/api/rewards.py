"""Rewards page endpoints: profile, collection and mascot."""

from flask_jwt_extended import jwt_required

from flowlingo.api import api_bp
from flowlingo.schemas import ChangeMascotRequest, parse_body
from flowlingo.services.sticker_service import StickerService
from flowlingo.utils import error_response, not_found, success_response
from flowlingo.utils.auth import current_user_id

MASCOT_ERRORS = {
    "unknown_sticker": ("NOT_FOUND", "Unknown sticker", 404),
    "not_owned": ("FORBIDDEN", "You don't own this sticker yet", 403),
    "user_not_found": ("NOT_FOUND", "User not found", 404),
}


@api_bp.route("/rewards/profile", methods=["GET"])
@jwt_required()
def get_rewards_profile():
    """Level, XP and collection summary."""
    profile = StickerService().get_reward_profile(current_user_id())
    if not profile:
        return not_found("User not found")
    return success_response(profile)


@api_bp.route("/rewards/collection", methods=["GET"])
@jwt_required()
def get_collection():
    """Owned stickers, rarest first, including the default dolphin."""
    stickers = StickerService().get_collection(current_user_id())
    return success_response({"stickers": stickers, "total": len(stickers)})


@api_bp.route("/rewards/change-mascot", methods=["POST"])
@jwt_required()
def change_mascot():
    """
    Equip a sticker as mascot.

    Request body:
    {
        "sticker_id": "panda"
    }
    """
    body, error = parse_body(ChangeMascotRequest)
    if error:
        return error

    result = StickerService().change_mascot(current_user_id(), body.sticker_id)
    if not result["success"]:
        code, message, status = MASCOT_ERRORS[result["error"]]
        return error_response(code, message, status_code=status)

    return success_response(
        {"mascot": result["mascot"], "emoji": result["emoji"]},
        message="Mascot updated",
    )


@api_bp.route("/rewards/mark-seen", methods=["POST"])
@jwt_required()
def mark_stickers_seen():
    """Clear NEW badges on the collection."""
    updated = StickerService().mark_seen(current_user_id())
    return success_response({"updated": updated})

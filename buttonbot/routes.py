import logging

from discord_interactions import InteractionType
from flask import Blueprint, current_app, jsonify, request

from buttonbot.button_handlers import button_handler
from buttonbot.utils import verify_signature

routes = Blueprint("routes", __name__)


@routes.route("/", methods=["POST"])
async def interaction_handler():
    try:
        verify_signature(request, current_app.config.get("DISCORD_PUBLIC_KEY"))
    except ValueError as e:
        logging.error(f"Verification failed: {e}")
        return jsonify({"error": "Invalid request signature"}), 401

    data = request.get_json(silent=True) or {}
    interaction_type = data.get("type")

    if interaction_type == InteractionType.PING:
        logging.info("Responding to PING.")
        return jsonify({"type": 1})

    if interaction_type == InteractionType.MESSAGE_COMPONENT:
        logging.info(f"Button clicked: {data.get('data', {}).get('custom_id')}")
        response = await button_handler.handle(data, current_app.config)
        return jsonify(response.to_dict())

    logging.warning(f"Unknown interaction type: {interaction_type}")
    return jsonify({"error": "Unknown interaction type"}), 400


@routes.route("/healthz", methods=["GET", "HEAD"])
def health_check():
    return "OK", 200

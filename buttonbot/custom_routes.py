import logging
from datetime import datetime, timezone

import requests
from flask import Blueprint, current_app, jsonify, request

from buttonbot.button_examples import EXAMPLES, send_example_message
from buttonbot.button_manager import Button, ButtonStyle, create_components
from buttonbot.utils import DiscordAPIError, fetch_channel, send_channel_message
from buttonbot.validators import (
    MAX_BUTTONS,
    MAX_CONTENT_LENGTH,
    MAX_CUSTOM_ID_LENGTH,
    MAX_LABEL_LENGTH,
    ValidationError,
    validate_buttons,
    validate_channel_id,
    validate_content,
)

custom_routes = Blueprint("custom_routes", __name__, url_prefix="/custom")

DEMO_BUTTONS = [
    {"label": "👍 Like", "custom_id": "like_button", "style": 3},
    {"label": "❤️ Favorite", "custom_id": "favorite_button", "style": 1},
    {"label": "🔄 Share", "custom_id": "share_button", "style": 2},
    {"label": "⚠️ Report", "custom_id": "report_button", "style": 4},
    {"label": "🔗 Visit Discord", "url": "https://discord.com", "style": 5},
    {"label": "🔢 Counter", "custom_id": "counter_button", "style": 1},
    {"label": "⏰ Time", "custom_id": "timestamp_button", "style": 2},
]
DEMO_CONTENT = "🎉 This is a demo message with buttons!\n\nClick a button below to try the interactions:"

# Raised while talking to Discord; ValueError includes CustomIdTooLong
SEND_FAILURES = (DiscordAPIError, requests.RequestException, ValueError)


class MissingTokenError(Exception):
    pass


def _bot_token():
    token = current_app.config.get("DISCORD_TOKEN")
    if not token:
        raise MissingTokenError("DISCORD_TOKEN environment variable is not set")
    return token


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body")
    return body


def _components_from(buttons):
    return create_components([
        Button(
            label=b["label"],
            style=b.get("style") or ButtonStyle.PRIMARY,
            custom_id=b.get("custom_id"),
            disabled=b.get("disabled", False),
            emoji=b.get("emoji"),
            url=b.get("url"),
        )
        for b in buttons
    ])


def _discord_summary(result):
    return {
        "id": result.get("id"),
        "timestamp": result.get("timestamp"),
        "channelId": result.get("channel_id"),
    }


def _failure(error, message):
    logging.error(f"{message}: {error}")
    return jsonify({"error": message, "details": str(error)}), 500


@custom_routes.route("/hello", methods=["GET"])
def hello():
    return jsonify({
        "message": "Hello from custom route!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


@custom_routes.route("/send-message", methods=["POST"])
def send_message():
    try:
        token = _bot_token()
        body = _json_body()
        validate_channel_id(body.get("channelId"))
        validate_content(body.get("content"))
    except MissingTokenError as e:
        return jsonify({"error": str(e)}), 500
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        result = send_channel_message(
            body["channelId"], body["content"], token,
            timeout=current_app.config.get("DISCORD_HTTP_TIMEOUT", 10)
        )
    except SEND_FAILURES as e:
        return _failure(e, "Failed to send message")

    return jsonify({
        "success": True,
        "message": "Message sent",
        "discordResponse": _discord_summary(result),
    })


@custom_routes.route("/channel/<channel_id>", methods=["GET"])
def channel_info(channel_id):
    try:
        token = _bot_token()
        validate_channel_id(channel_id)
    except MissingTokenError as e:
        return jsonify({"error": str(e)}), 500
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        channel = fetch_channel(channel_id, token, timeout=current_app.config.get("DISCORD_HTTP_TIMEOUT", 10))
    except DiscordAPIError as e:
        if e.status_code == 404:
            return jsonify({"error": "Channel not found or the bot has no access to it"}), 404
        return _failure(e, "Failed to fetch channel info")
    except SEND_FAILURES as e:
        return _failure(e, "Failed to fetch channel info")

    return jsonify({
        "success": True,
        "channel": {
            "id": channel.get("id"),
            "name": channel.get("name"),
            "type": channel.get("type"),
            "guildId": channel.get("guild_id"),
        },
    })


@custom_routes.route("/send-message-with-buttons", methods=["POST"])
def send_message_with_buttons():
    try:
        token = _bot_token()
        body = _json_body()
        validate_channel_id(body.get("channelId"))
        validate_content(body.get("content"))
        validate_buttons(body.get("buttons"))
    except MissingTokenError as e:
        return jsonify({"error": str(e)}), 500
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        result = send_channel_message(
            body["channelId"], body["content"], token, _components_from(body["buttons"]),
            timeout=current_app.config.get("DISCORD_HTTP_TIMEOUT", 10)
        )
    except SEND_FAILURES as e:
        return _failure(e, "Failed to send message with buttons")

    return jsonify({
        "success": True,
        "message": "Message with buttons sent",
        "discordResponse": _discord_summary(result),
        "buttonsCount": len(body["buttons"]),
    })


@custom_routes.route("/send-demo-buttons", methods=["POST"])
def send_demo_buttons():
    try:
        token = _bot_token()
        body = _json_body()
        validate_channel_id(body.get("channelId"))
        content = body.get("content") or DEMO_CONTENT
        validate_content(content)
    except MissingTokenError as e:
        return jsonify({"error": str(e)}), 500
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        result = send_channel_message(
            body["channelId"], content, token, _components_from(DEMO_BUTTONS),
            timeout=current_app.config.get("DISCORD_HTTP_TIMEOUT", 10)
        )
    except SEND_FAILURES as e:
        return _failure(e, "Failed to send demo buttons")

    return jsonify({
        "success": True,
        "message": "Demo button message sent",
        "discordResponse": _discord_summary(result),
        "buttonsUsed": [
            {"label": b["label"], "style": b["style"], "type": "link" if b.get("url") else "interaction"}
            for b in DEMO_BUTTONS
        ],
    })


@custom_routes.route("/send-example", methods=["POST"])
def send_example():
    try:
        token = _bot_token()
        body = _json_body()
        validate_channel_id(body.get("channelId"))
        example_type = body.get("exampleType", "simple")
        if example_type not in EXAMPLES:
            raise ValidationError(f"exampleType must be one of: {', '.join(EXAMPLES)}")
    except MissingTokenError as e:
        return jsonify({"error": str(e)}), 500
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        result = send_example_message(
            body["channelId"], token, example_type,
            timeout=current_app.config.get("DISCORD_HTTP_TIMEOUT", 10)
        )
    except SEND_FAILURES as e:
        return _failure(e, "Failed to send example message")

    return jsonify({
        "success": True,
        "message": f"Example '{example_type}' sent",
        "discordResponse": _discord_summary(result),
    })


@custom_routes.route("/docs", methods=["GET"])
def docs():
    return jsonify({
        "title": "Discord Bot Custom API",
        "version": "1.0.0",
        "endpoints": {
            "GET /custom/hello": {
                "description": "Simple greeting",
                "response": "JSON object with a greeting and a timestamp",
            },
            "POST /custom/send-message": {
                "description": "Send a message to a Discord channel",
                "body": {
                    "channelId": "string (required) - Discord channel ID",
                    "content": f"string (required) - message text (max {MAX_CONTENT_LENGTH} characters)",
                },
                "response": "Confirmation with the created message",
            },
            "GET /custom/channel/:channelId": {
                "description": "Get Discord channel info",
                "params": {"channelId": "string (required) - Discord channel ID"},
                "response": "Basic channel information",
            },
            "POST /custom/send-message-with-buttons": {
                "description": "Send a message with buttons to a Discord channel",
                "body": {
                    "channelId": "string (required) - Discord channel ID",
                    "content": f"string (required) - message text (max {MAX_CONTENT_LENGTH} characters)",
                    "buttons": "array (required) - button definitions",
                },
                "response": "Confirmation with the created message",
            },
            "POST /custom/send-demo-buttons": {
                "description": "Send the preset demo button message",
                "body": {
                    "channelId": "string (required) - Discord channel ID",
                    "content": "string (optional) - custom message text",
                },
                "response": "Confirmation and the buttons used",
            },
            "POST /custom/send-example": {
                "description": "Send one of the example button sets",
                "body": {
                    "channelId": "string (required) - Discord channel ID",
                    "exampleType": f"string (optional) - one of {', '.join(EXAMPLES)}",
                },
                "response": "Confirmation with the created message",
            },
            "GET /custom/docs": {
                "description": "This API description",
                "response": "Endpoint list and usage",
            },
        },
        "usage": {
            "sendMessageWithButtons": {
                "url": "POST /custom/send-message-with-buttons",
                "example": {
                    "channelId": "1234567890123456789",
                    "content": "Hello from the API!",
                    "buttons": [
                        {"label": "Button 1", "custom_id": "button1", "style": 1},
                        {"label": "Docs", "url": "https://example.com", "style": 5},
                    ],
                },
            },
        },
        "buttonStyles": {
            "1": "Primary (blurple)",
            "2": "Secondary (grey)",
            "3": "Success (green)",
            "4": "Danger (red)",
            "5": "Link (requires url)",
        },
        "buttonConfiguration": {
            "required": ["label", "custom_id or url"],
            "optional": ["style", "disabled", "emoji"],
            "limits": {
                "maxButtons": MAX_BUTTONS,
                "maxLabelLength": MAX_LABEL_LENGTH,
                "maxCustomIdLength": MAX_CUSTOM_ID_LENGTH,
                "maxButtonsPerRow": 5,
            },
        },
    })

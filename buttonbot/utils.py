import logging

import requests

DISCORD_API_BASE = "https://discord.com/api/v10"
DEFAULT_TIMEOUT = 10


class DiscordAPIError(Exception):
    """A non-2xx answer from the Discord REST API."""

    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text
        super().__init__(f"Discord API returned {status_code}: {text}")


def _bot_headers(token):
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bot {token}",
    }


def send_channel_message(channel_id, content, token, components=None, embeds=None, timeout=DEFAULT_TIMEOUT):
    """
    Posts a message to a Discord channel.

    Args:
        channel_id (str): Target channel ID.
        content (str): Message text.
        token (str): Discord bot token.
        components (list): Optional action rows.
        embeds (list): Optional embeds.
        timeout (float): Request timeout in seconds.

    Returns:
        dict: The created message as returned by Discord.

    Raises:
        DiscordAPIError: If Discord answers with a non-2xx status.
    """
    url = f"{DISCORD_API_BASE}/channels/{channel_id}/messages"
    payload = {"content": content}
    if components:
        payload["components"] = components
    if embeds:
        payload["embeds"] = embeds

    response = requests.post(url, json=payload, headers=_bot_headers(token), timeout=timeout)
    if not response.ok:
        logging.error(f"Failed to send message to channel {channel_id}: {response.status_code} {response.text}")
        raise DiscordAPIError(response.status_code, response.text)

    logging.info(f"Sent message to channel {channel_id}.")
    return response.json()


def fetch_channel(channel_id, token, timeout=DEFAULT_TIMEOUT):
    """
    Fetches channel details.

    Raises:
        DiscordAPIError: If Discord answers with a non-2xx status.
    """
    url = f"{DISCORD_API_BASE}/channels/{channel_id}"
    response = requests.get(url, headers={"Authorization": f"Bot {token}"}, timeout=timeout)
    if not response.ok:
        logging.error(f"Failed to fetch channel {channel_id}: {response.status_code} {response.text}")
        raise DiscordAPIError(response.status_code, response.text)
    return response.json()


def send_followup_response(application_id, interaction_token, payload, timeout=DEFAULT_TIMEOUT):
    """
    Sends a follow-up response to Discord via webhook.

    Args:
        application_id (str): The Discord application ID.
        interaction_token (str): The interaction token provided by Discord.
        payload (dict): The data to send in the response.

    Raises:
        DiscordAPIError: If the response fails.
    """
    url = f"{DISCORD_API_BASE}/webhooks/{application_id}/{interaction_token}"
    headers = {"Content-Type": "application/json"}

    response = requests.post(url, json=payload, headers=headers, timeout=timeout)
    if response.ok:
        logging.info("Successfully sent follow-up response.")
    else:
        logging.error(f"Failed to send follow-up response: {response.status_code} {response.text}")
        raise DiscordAPIError(response.status_code, response.text)


def verify_signature(req, public_key):
    """
    Verifies Discord's signature on incoming requests.

    Args:
        req: The Flask request object.
        public_key (str): The application's hex encoded Ed25519 public key.

    Raises:
        ValueError: If the signature is invalid or missing.
    """
    from nacl.signing import VerifyKey
    from nacl.exceptions import BadSignatureError

    signature = req.headers.get("X-Signature-Ed25519")
    timestamp = req.headers.get("X-Signature-Timestamp")
    body = req.get_data()

    if not signature or not timestamp:
        raise ValueError("Missing signature or timestamp")
    if not public_key:
        raise ValueError("DISCORD_PUBLIC_KEY is not configured")

    try:
        verify_key = VerifyKey(bytes.fromhex(public_key))
        verify_key.verify(timestamp.encode() + body, bytes.fromhex(signature))
    except (BadSignatureError, ValueError):
        raise ValueError("Invalid request signature")

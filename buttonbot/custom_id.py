import base64
import json
import logging

MAX_CUSTOM_ID_LENGTH = 100
PARAM_SEPARATOR = "|"


class CustomIdTooLong(ValueError):
    """Raised when an encoded custom_id does not fit Discord's 100 character limit."""

    def __init__(self, custom_id):
        self.custom_id = custom_id
        self.length = len(custom_id)
        super().__init__(
            f"Button custom_id is too long ({self.length} > {MAX_CUSTOM_ID_LENGTH} characters), "
            "use fewer or shorter parameters"
        )


def encode(base_id, params=None):
    """
    Packs button parameters into a custom_id.

    Args:
        base_id (str): The registry key of the button handler.
        params (dict): JSON-compatible parameters to carry with the button.

    Returns:
        str: `base_id` when there are no params, otherwise `base_id|<base64 json>`.

    Raises:
        CustomIdTooLong: If the result exceeds 100 characters.
    """
    if not params:
        return base_id

    payload = json.dumps(params, separators=(",", ":"), ensure_ascii=False)
    encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    custom_id = f"{base_id}{PARAM_SEPARATOR}{encoded}"

    if len(custom_id) > MAX_CUSTOM_ID_LENGTH:
        raise CustomIdTooLong(custom_id)
    return custom_id


def decode(custom_id):
    """
    Unpacks a custom_id produced by `encode`.

    Never raises: a malformed payload yields the untouched custom_id and no params.

    Args:
        custom_id (str): The custom_id from the interaction.

    Returns:
        tuple: (base_id, params)
    """
    if PARAM_SEPARATOR not in custom_id:
        return custom_id, {}

    base_id, _, encoded = custom_id.partition(PARAM_SEPARATOR)
    try:
        payload = base64.b64decode(encoded, validate=True).decode("utf-8")
        params = json.loads(payload)
    except ValueError as e:
        logging.warning(f"Could not decode button params in {custom_id!r}: {e}")
        return custom_id, {}

    if not isinstance(params, dict):
        logging.warning(f"Button params in {custom_id!r} are not an object")
        return custom_id, {}
    return base_id, params


def base_of(custom_id):
    return custom_id.partition(PARAM_SEPARATOR)[0]

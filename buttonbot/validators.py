import re

CHANNEL_ID_PATTERN = re.compile(r"\d{17,19}")
MAX_CONTENT_LENGTH = 2000
MAX_BUTTONS = 25
MAX_LABEL_LENGTH = 80
MAX_CUSTOM_ID_LENGTH = 100
BUTTON_STYLES = (1, 2, 3, 4, 5)
LINK_STYLE = 5


class ValidationError(ValueError):
    pass


def validate_channel_id(channel_id):
    if not channel_id:
        raise ValidationError("channelId is required")
    if not isinstance(channel_id, str) or not CHANNEL_ID_PATTERN.fullmatch(channel_id):
        raise ValidationError("channelId is not a valid Discord ID")


def validate_content(content):
    if not content:
        raise ValidationError("content is required")
    if not isinstance(content, str):
        raise ValidationError("content must be a string")
    if len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError(f"content cannot exceed {MAX_CONTENT_LENGTH} characters")


def validate_buttons(buttons):
    """
    Checks a list of button definitions against Discord's limits.

    Args:
        buttons (list): Dicts with label, style, custom_id or url.

    Raises:
        ValidationError: Naming the first offending button (1-based).
    """
    if not buttons or not isinstance(buttons, list):
        raise ValidationError("buttons is required and must be a non-empty array")
    if len(buttons) > MAX_BUTTONS:
        raise ValidationError(f"Cannot send more than {MAX_BUTTONS} buttons")

    for i, button in enumerate(buttons, start=1):
        if not isinstance(button, dict):
            raise ValidationError(f"Button {i} must be an object")

        label = button.get("label")
        if not label or not isinstance(label, str):
            raise ValidationError(f"Button {i} is missing a valid label")
        if len(label) > MAX_LABEL_LENGTH:
            raise ValidationError(f"Button {i} label cannot exceed {MAX_LABEL_LENGTH} characters")

        style = button.get("style")
        if style is not None and (isinstance(style, bool) or not isinstance(style, int) or style not in BUTTON_STYLES):
            raise ValidationError(f"Button {i} style must be a number between 1 and 5")

        if style == LINK_STYLE:
            url = button.get("url")
            if not url or not isinstance(url, str):
                raise ValidationError(f"Link button {i} is missing a valid url")
            if button.get("custom_id") is not None:
                raise ValidationError(f"Link button {i} cannot have a custom_id")
        else:
            if button.get("url") is not None:
                raise ValidationError(f"Button {i} has a url but is not a link button (style 5)")
            custom_id = button.get("custom_id")
            if not custom_id or not isinstance(custom_id, str):
                raise ValidationError(f"Button {i} is missing a valid custom_id")
            if len(custom_id) > MAX_CUSTOM_ID_LENGTH:
                raise ValidationError(f"Button {i} custom_id cannot exceed {MAX_CUSTOM_ID_LENGTH} characters")

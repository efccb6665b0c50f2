import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from discord_interactions import InteractionResponseFlags, InteractionResponseType

from buttonbot.custom_id import base_of

UNKNOWN_USER_NAME = "unknown user"
UNKNOWN_USER_ID = "unknown"


class ResponseType(str, Enum):
    """How a button interaction is answered."""

    EPHEMERAL = "ephemeral"  # only the clicker sees it
    PUBLIC = "public"
    UPDATE = "update"  # edits the message the button lives on
    DEFERRED = "deferred"  # "bot is thinking...", follow-up sent later


@dataclass
class UserInfo:
    user_name: str
    user_id: str
    params: dict = field(default_factory=dict)


@dataclass
class InteractionResponse:
    content: str = None
    response_type: str = ResponseType.EPHEMERAL
    components: list = None

    def to_dict(self):
        """
        Serializes the response into Discord's interaction response payload.

        Returns:
            dict: The body returned to Discord for the webhook call.
        """
        if self.response_type == ResponseType.DEFERRED:
            return {
                "type": InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE,
                "data": {"flags": InteractionResponseFlags.EPHEMERAL},
            }

        data = {}
        if self.content is not None:
            data["content"] = self.content
        # An empty list is kept on purpose: it removes the existing buttons
        if self.components is not None:
            data["components"] = self.components

        if self.response_type == ResponseType.PUBLIC:
            return {"type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, "data": data}
        if self.response_type == ResponseType.UPDATE:
            return {"type": InteractionResponseType.UPDATE_MESSAGE, "data": data}

        data["flags"] = InteractionResponseFlags.EPHEMERAL
        return {"type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, "data": data}


class ButtonAction(ABC):
    """
    Base class for button handlers that carry their own state.

    Subclasses get their dependencies through the constructor and are registered
    like any coroutine function, since instances are awaitable callables.
    """

    @abstractmethod
    async def handle(self, interaction, env, user_info):
        ...

    async def __call__(self, interaction, env, user_info):
        return await self.handle(interaction, env, user_info)


class ButtonHandler:
    """
    Maps base custom_ids to async handlers and dispatches button interactions.
    """

    def __init__(self):
        self.handlers = {}

    def register(self, custom_id, handler):
        """
        Registers a handler, replacing any previous one for the same custom_id.

        Args:
            custom_id (str): Base custom_id (without encoded params).
            handler: Async callable taking (interaction, env, user_info).
        """
        self.handlers[custom_id] = handler

    def get_handler(self, custom_id):
        return self.handlers.get(custom_id)

    def unregister(self, custom_id):
        self.handlers.pop(custom_id, None)

    def clear(self):
        self.handlers.clear()

    async def handle(self, interaction, env):
        """
        Dispatches a MESSAGE_COMPONENT interaction to its handler.

        Args:
            interaction (dict): The interaction payload sent by Discord.
            env (Mapping): Application config passed through to handlers.

        Returns:
            InteractionResponse: Always a valid response, even when the handler fails.
        """
        custom_id = (interaction.get("data") or {}).get("custom_id", "")
        user = (interaction.get("member") or {}).get("user") or interaction.get("user") or {}
        user_name = user.get("username") or UNKNOWN_USER_NAME
        user_id = user.get("id") or UNKNOWN_USER_ID

        handler = self.get_handler(base_of(custom_id))
        if handler is None:
            logging.info(f"No handler registered for button {custom_id}")
            return self.create_default_response(user_name, custom_id)

        try:
            return await handler(interaction, env, UserInfo(user_name, user_id))
        except Exception as e:
            logging.error(f"Error handling button {custom_id}: {e}", exc_info=True)
            return self.create_error_response(user_name, custom_id, str(e))

    def create_response(self, content, response_type=ResponseType.EPHEMERAL, components=None):
        if response_type == ResponseType.DEFERRED:
            return InteractionResponse(None, ResponseType.DEFERRED, None)
        return InteractionResponse(content, response_type, components)

    def create_default_response(self, user_name, custom_id):
        return self.create_response(
            f"🤔 {user_name} clicked button: {custom_id}",
            ResponseType.EPHEMERAL
        )

    def create_error_response(self, user_name, custom_id, error_message):
        return self.create_response(
            f"❌ {user_name}, something went wrong handling button {custom_id}: {error_message}",
            ResponseType.EPHEMERAL
        )


class ClickCounter:
    """Process-wide click tally shared by every counter_button press."""

    def __init__(self):
        self.count = 0
        self._lock = threading.Lock()

    def increment(self):
        with self._lock:
            self.count += 1
            return self.count


class CounterButton(ButtonAction):
    def __init__(self, counter):
        self.counter = counter

    async def handle(self, interaction, env, user_info):
        count = self.counter.increment()
        return button_handler.create_response(
            f"🔢 {user_info.user_name} clicked the counter! Current count: {count}",
            ResponseType.PUBLIC
        )


button_handler = ButtonHandler()


def _simple_reply(template, response_type=ResponseType.EPHEMERAL, components=None):
    async def reply(interaction, env, user_info):
        return button_handler.create_response(
            template.format(user_name=user_info.user_name),
            response_type,
            components
        )
    return reply


button_handler.register("like_button", _simple_reply("👍 {user_name} liked this!"))
button_handler.register("favorite_button", _simple_reply("❤️ {user_name} saved this message!"))
button_handler.register("share_button", _simple_reply("🔄 {user_name} wants to share this message!"))
button_handler.register(
    "report_button",
    _simple_reply("⚠️ {user_name} reported this message, a moderator will take a look.")
)
button_handler.register(
    "confirm_action",
    _simple_reply("✅ {user_name} confirmed the action!", ResponseType.UPDATE, [])
)
button_handler.register(
    "cancel_action",
    _simple_reply("❌ {user_name} cancelled the action.", ResponseType.UPDATE, [])
)
button_handler.register("agree", _simple_reply("✅ {user_name} agreed!"))
button_handler.register("decline", _simple_reply("❌ {user_name} declined."))
button_handler.register("counter_button", CounterButton(ClickCounter()))


async def timestamp_button(interaction, env, user_info):
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    return button_handler.create_response(
        f"⏰ {user_info.user_name} asked for the time: {now}",
        ResponseType.EPHEMERAL
    )


button_handler.register("timestamp_button", timestamp_button)

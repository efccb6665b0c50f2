import json
import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum

from buttonbot import custom_id as custom_id_codec
from buttonbot.button_handlers import ResponseType, button_handler
from buttonbot.utils import DEFAULT_TIMEOUT, send_channel_message

ACTION_ROW = 1
BUTTON = 2
MAX_BUTTONS_PER_ROW = 5
MAX_LABEL_LENGTH = 80
MAX_BUTTON_CONFIGS = 1000


class ButtonStyle(IntEnum):
    PRIMARY = 1  # blurple
    SECONDARY = 2  # grey
    SUCCESS = 3  # green
    DANGER = 4  # red
    LINK = 5  # opens a URL, no interaction


class ButtonConfigError(ValueError):
    pass


@dataclass
class Button:
    label: str
    style: int = ButtonStyle.PRIMARY
    custom_id: str = None
    base_custom_id: str = None
    params: dict = field(default_factory=dict)
    disabled: bool = False
    emoji: dict = None
    url: str = None
    handler: object = None

    def to_component(self):
        component = {
            "type": BUTTON,
            "style": int(self.style or ButtonStyle.PRIMARY),
            "label": self.label,
            "disabled": bool(self.disabled),
        }
        if self.custom_id:
            component["custom_id"] = self.custom_id
        if self.emoji:
            component["emoji"] = self.emoji
        if self.url:
            component["url"] = self.url
        return component


def create_components(buttons):
    """
    Lays buttons out in action rows of at most five, keeping their order.

    Args:
        buttons (list): `Button` objects.

    Returns:
        list: Discord action row components.
    """
    return [
        {
            "type": ACTION_ROW,
            "components": [button.to_component() for button in buttons[i:i + MAX_BUTTONS_PER_ROW]],
        }
        for i in range(0, len(buttons), MAX_BUTTONS_PER_ROW)
    ]


class ButtonManager:
    """
    Creates buttons and wires their handlers into a `ButtonHandler` registry.
    """

    def __init__(self, registry, max_configs=MAX_BUTTON_CONFIGS):
        self.registry = registry
        self.max_configs = max_configs
        self.button_configs = {}
        self.dynamic_handlers = {}
        self.param_handlers = {}

    def create_button(self, label, custom_id=None, params=None, style=ButtonStyle.PRIMARY,
                      handler=None, disabled=False, emoji=None, url=None):
        """
        Builds a button and registers its handler under the base custom_id.

        Params are encoded into the custom_id so one handler serves every
        parameterization of the same button.

        Raises:
            ButtonConfigError: If a required field is missing or invalid.
            CustomIdTooLong: If the encoded custom_id exceeds 100 characters.
        """
        params = params or {}

        if not label:
            raise ButtonConfigError("Button label is required")
        if len(label) > MAX_LABEL_LENGTH:
            raise ButtonConfigError(f"Button label cannot exceed {MAX_LABEL_LENGTH} characters")
        try:
            style = ButtonStyle(style)
        except ValueError:
            raise ButtonConfigError(f"Button style must be between 1 and 5, got {style}")

        if style == ButtonStyle.LINK:
            if not url:
                raise ButtonConfigError("Link buttons require a url")
            if custom_id:
                raise ButtonConfigError("Link buttons cannot have a custom_id")
        else:
            if not custom_id:
                raise ButtonConfigError("Button custom_id is required")
            if not callable(handler):
                raise ButtonConfigError("Button handler is required")

        encoded_custom_id = custom_id_codec.encode(custom_id, params) if custom_id else None

        button = Button(
            label=label,
            style=style,
            custom_id=encoded_custom_id,
            base_custom_id=custom_id,
            params=params,
            disabled=disabled,
            emoji=emoji,
            url=url,
            handler=handler,
        )

        if handler and custom_id:
            self.register_param_handler(custom_id, handler)
            self.remember(encoded_custom_id, button)

        return button

    def remember(self, encoded_custom_id, button):
        # Pagination mints a new id per page, so keep only the newest entries
        self.button_configs.pop(encoded_custom_id, None)
        self.button_configs[encoded_custom_id] = button
        while len(self.button_configs) > self.max_configs:
            del self.button_configs[next(iter(self.button_configs))]

    def register_param_handler(self, base_custom_id, handler):
        """
        Registers `handler` so it receives the params decoded from the clicked custom_id.

        Args:
            base_custom_id (str): Registry key.
            handler: Async callable taking (interaction, env, user_info).
        """
        self.param_handlers[base_custom_id] = handler

        async def wrapped_handler(interaction, env, user_info):
            _, params = custom_id_codec.decode(interaction["data"]["custom_id"])
            return await handler(interaction, env, replace(user_info, params={**user_info.params, **params}))

        self.registry.register(base_custom_id, wrapped_handler)
        self.dynamic_handlers[base_custom_id] = wrapped_handler

    def register_handler(self, custom_id, handler):
        self.registry.register(custom_id, handler)
        self.dynamic_handlers[custom_id] = handler

    def create_button_components(self, buttons):
        return create_components(buttons)

    def send_message_with_buttons(self, channel_id, content, buttons, token, timeout=DEFAULT_TIMEOUT):
        """
        Sends a message carrying `buttons` to a channel.

        Returns:
            dict: Discord's message object.

        Raises:
            DiscordAPIError: If Discord rejects the message.
        """
        components = self.create_button_components(buttons)
        logging.info(f"Sending message with {len(buttons)} buttons to channel {channel_id}")
        return send_channel_message(channel_id, content, token, components, timeout=timeout)

    def create_order_buttons(self, order_id, user_id, status):
        buttons = []

        async def order_details(interaction, env, user_info):
            params = user_info.params
            return self.registry.create_response(
                f"📋 {user_info.user_name} opened the order details:\n"
                f"• Order ID: {params['order_id']}\n"
                f"• User ID: {params['user_id']}\n"
                f"• Status: {status}",
                ResponseType.EPHEMERAL
            )

        buttons.append(self.create_button(
            label="📋 Details",
            custom_id="order_details",
            params={"order_id": order_id, "user_id": user_id},
            style=ButtonStyle.PRIMARY,
            handler=order_details,
        ))

        if status != "completed":
            async def order_confirm(interaction, env, user_info):
                return self.registry.create_response(
                    f"✅ {user_info.user_name} confirmed delivery of order {user_info.params['order_id']}!",
                    ResponseType.UPDATE,
                    []
                )

            buttons.append(self.create_button(
                label="✅ Confirm delivery",
                custom_id="order_confirm",
                params={"order_id": order_id, "user_id": user_id},
                style=ButtonStyle.SUCCESS,
                handler=order_confirm,
            ))

        if status not in ("completed", "refunded"):
            async def order_refund(interaction, env, user_info):
                return self.registry.create_response(
                    f"🔄 {user_info.user_name} requested a refund for order "
                    f"{user_info.params['order_id']}, please wait while we process it.",
                    ResponseType.EPHEMERAL
                )

            buttons.append(self.create_button(
                label="🔄 Request refund",
                custom_id="order_refund",
                params={"order_id": order_id, "user_id": user_id},
                style=ButtonStyle.DANGER,
                handler=order_refund,
            ))

        return buttons

    def create_product_buttons(self, product_id, name, price):
        async def add_to_cart(interaction, env, user_info):
            p = user_info.params
            return self.registry.create_response(
                f"🛒 {user_info.user_name} added \"{p['name']}\" (ID: {p['product_id']}, price: ${p['price']}) to the cart!",
                ResponseType.EPHEMERAL
            )

        async def buy_now(interaction, env, user_info):
            p = user_info.params
            return self.registry.create_response(
                f"💳 {user_info.user_name} bought \"{p['name']}\" (ID: {p['product_id']}, price: ${p['price']})!",
                ResponseType.EPHEMERAL
            )

        async def favorite_product(interaction, env, user_info):
            p = user_info.params
            return self.registry.create_response(
                f"⭐ {user_info.user_name} saved \"{p['name']}\" (ID: {p['product_id']})!",
                ResponseType.EPHEMERAL
            )

        return [
            self.create_button(
                label="🛒 Add to cart",
                custom_id="add_to_cart",
                params={"product_id": product_id, "name": name, "price": price},
                style=ButtonStyle.PRIMARY,
                handler=add_to_cart,
            ),
            self.create_button(
                label="💳 Buy now",
                custom_id="buy_now",
                params={"product_id": product_id, "name": name, "price": price},
                style=ButtonStyle.SUCCESS,
                handler=buy_now,
            ),
            self.create_button(
                label="⭐ Favorite",
                custom_id="favorite_product",
                params={"product_id": product_id, "name": name},
                style=ButtonStyle.SECONDARY,
                handler=favorite_product,
            ),
        ]

    def create_pagination_buttons(self, current_page, total_pages, data_type):
        """
        Builds previous / page indicator / next buttons.

        Clicking previous or next updates the message in place with the
        buttons for the new page.
        """
        def page_handler(arrow):
            async def change_page(interaction, env, user_info):
                page = user_info.params["page"]
                kind = user_info.params["data_type"]
                return self.registry.create_response(
                    f"{arrow} {user_info.user_name} switched to page {page} ({kind})",
                    ResponseType.UPDATE,
                    self.create_button_components(self.create_pagination_buttons(page, total_pages, kind))
                )
            return change_page

        async def page_info(interaction, env, user_info):
            # Disabled buttons never fire, kept so the registry knows the id
            params = user_info.params
            return self.registry.create_response(
                f"📄 Current page: {params['current_page']} / {params['total_pages']}",
                ResponseType.EPHEMERAL
            )

        buttons = []
        if current_page > 1:
            buttons.append(self.create_button(
                label="⬅️ Previous",
                custom_id="page_prev",
                params={"page": current_page - 1, "data_type": data_type},
                style=ButtonStyle.SECONDARY,
                handler=page_handler("⬅️"),
            ))

        buttons.append(self.create_button(
            label=f"{current_page} / {total_pages}",
            custom_id="page_info",
            params={"current_page": current_page, "total_pages": total_pages},
            style=ButtonStyle.PRIMARY,
            disabled=True,
            handler=page_info,
        ))

        if current_page < total_pages:
            buttons.append(self.create_button(
                label="➡️ Next",
                custom_id="page_next",
                params={"page": current_page + 1, "data_type": data_type},
                style=ButtonStyle.SECONDARY,
                handler=page_handler("➡️"),
            ))

        return buttons

    def create_common_buttons(self, like=True, favorite=True, share=True, report=True):
        def reply(template):
            async def handler(interaction, env, user_info):
                return self.registry.create_response(
                    template.format(user_name=user_info.user_name),
                    ResponseType.EPHEMERAL
                )
            return handler

        buttons = []
        if like:
            buttons.append(self.create_button(
                label="👍 Like", custom_id="like_button", style=ButtonStyle.SUCCESS,
                handler=reply("👍 {user_name} liked this!"),
            ))
        if favorite:
            buttons.append(self.create_button(
                label="❤️ Favorite", custom_id="favorite_button", style=ButtonStyle.PRIMARY,
                handler=reply("❤️ {user_name} saved this message!"),
            ))
        if share:
            buttons.append(self.create_button(
                label="🔄 Share", custom_id="share_button", style=ButtonStyle.SECONDARY,
                handler=reply("🔄 {user_name} wants to share this message!"),
            ))
        if report:
            buttons.append(self.create_button(
                label="⚠️ Report", custom_id="report_button", style=ButtonStyle.DANGER,
                handler=reply("⚠️ {user_name} reported this message, a moderator will take a look."),
            ))
        return buttons

    def create_confirm_cancel_buttons(self, on_confirm=None, on_cancel=None,
                                      confirm_text="✅ Confirm", cancel_text="❌ Cancel", params=None):
        """
        Builds a confirm / cancel pair. The default handlers remove the buttons
        from the message once either one is pressed.
        """
        params = params or {}

        def describe(p):
            return f" Params: {json.dumps(p)}" if p else ""

        async def default_confirm(interaction, env, user_info):
            return self.registry.create_response(
                f"✅ {user_info.user_name} confirmed the action!{describe(user_info.params)}",
                ResponseType.UPDATE,
                []
            )

        async def default_cancel(interaction, env, user_info):
            return self.registry.create_response(
                f"❌ {user_info.user_name} cancelled the action.{describe(user_info.params)}",
                ResponseType.UPDATE,
                []
            )

        return [
            self.create_button(
                label=confirm_text,
                custom_id="confirm_action",
                params=params,
                style=ButtonStyle.SUCCESS,
                handler=on_confirm or default_confirm,
            ),
            self.create_button(
                label=cancel_text,
                custom_id="cancel_action",
                params=params,
                style=ButtonStyle.DANGER,
                handler=on_cancel or default_cancel,
            ),
        ]

    def get_button_config(self, custom_id):
        return self.button_configs.get(custom_id)

    def get_all_buttons(self):
        return list(self.button_configs.values())

    def cleanup(self):
        """Forgets the buttons and handlers created through this manager."""
        self.dynamic_handlers.clear()
        self.button_configs.clear()
        self.param_handlers.clear()


button_manager = ButtonManager(button_handler)

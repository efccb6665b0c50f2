"""
Extra button handlers registered on the shared registry at import time.

Add your own handlers here with `button_handler.register(custom_id, handler)`.
"""
import logging
import threading
import time

import requests

from buttonbot.button_handlers import ButtonAction, ResponseType, button_handler
from buttonbot.button_manager import Button, ButtonStyle, create_components
from buttonbot.utils import DEFAULT_TIMEOUT, DiscordAPIError, send_followup_response


async def hello_button(interaction, env, user_info):
    return button_handler.create_response(
        f"👋 Hello, {user_info.user_name}! Welcome to the bot!",
        ResponseType.EPHEMERAL
    )


async def server_info_button(interaction, env, user_info):
    return button_handler.create_response(
        "🏠 Server info:\n"
        f"• Server ID: {interaction.get('guild_id')}\n"
        f"• Channel ID: {interaction.get('channel_id')}\n"
        f"• Requested by: {user_info.user_name}",
        ResponseType.EPHEMERAL
    )


class VoteBoard:
    """Yes/no tally shared by the vote_yes and vote_no buttons."""

    def __init__(self):
        self.yes = 0
        self.no = 0
        self._lock = threading.Lock()

    def vote(self, choice):
        with self._lock:
            if choice == "yes":
                self.yes += 1
            else:
                self.no += 1
            return self.yes, self.no


class VoteHandler(ButtonAction):
    def __init__(self, board, choice):
        self.board = board
        self.choice = choice

    async def handle(self, interaction, env, user_info):
        yes, no = self.board.vote(self.choice)
        vote_buttons = [
            Button(label=f"✅ Yes ({yes})", style=ButtonStyle.SUCCESS, custom_id="vote_yes"),
            Button(label=f"❌ No ({no})", style=ButtonStyle.DANGER, custom_id="vote_no"),
        ]
        return button_handler.create_response(
            f"📊 Votes updated! {user_info.user_name} voted {self.choice}. Yes: {yes}, No: {no}",
            ResponseType.PUBLIC,
            create_components(vote_buttons)
        )


async def weather_button(interaction, env, user_info):
    # Static sample data, swap in a real weather API call here
    weather = {
        "city": "Beijing",
        "temperature": "22°C",
        "condition": "Sunny",
        "humidity": "65%",
    }
    return button_handler.create_response(
        f"🌤️ Weather for {user_info.user_name}:\n"
        f"• City: {weather['city']}\n"
        f"• Temperature: {weather['temperature']}\n"
        f"• Condition: {weather['condition']}\n"
        f"• Humidity: {weather['humidity']}",
        ResponseType.EPHEMERAL
    )


async def admin_only_button(interaction, env, user_info):
    if user_info.user_id not in env.get("ADMIN_USER_IDS", []):
        return button_handler.create_response(
            f"🚫 {user_info.user_name}, this feature is for admins only.",
            ResponseType.EPHEMERAL
        )
    return button_handler.create_response(
        f"👑 {user_info.user_name}, admin mode activated!",
        ResponseType.EPHEMERAL
    )


def finish_slow_process(application_id, interaction_token, user_name, delay=5, timeout=DEFAULT_TIMEOUT):
    """
    Does the long running work for slow_process_button and posts the result.

    Args:
        application_id (str): Discord application ID.
        interaction_token (str): Token of the deferred interaction.
        user_name (str): Name of the user who clicked.
        delay (float): Simulated processing time in seconds.
        timeout (float): Request timeout in seconds.
    """
    time.sleep(delay)
    try:
        send_followup_response(
            application_id,
            interaction_token,
            {"content": f"✅ {user_name}, your request has finished processing!"},
            timeout=timeout
        )
    except (DiscordAPIError, requests.RequestException) as e:
        logging.error(f"Error sending slow process result: {e}")


async def slow_process_button(interaction, env, user_info):
    application_id = env.get("DISCORD_APP_ID")
    token = interaction.get("token")
    if application_id and token:
        threading.Thread(
            target=finish_slow_process,
            args=(application_id, token, user_info.user_name),
            kwargs={"timeout": env.get("DISCORD_HTTP_TIMEOUT", DEFAULT_TIMEOUT)},
            daemon=True
        ).start()
    else:
        logging.warning("DISCORD_APP_ID or interaction token missing, skipping follow-up")
    return button_handler.create_response("", ResponseType.DEFERRED)


vote_board = VoteBoard()

button_handler.register("hello_button", hello_button)
button_handler.register("server_info_button", server_info_button)
button_handler.register("vote_yes", VoteHandler(vote_board, "yes"))
button_handler.register("vote_no", VoteHandler(vote_board, "no"))
button_handler.register("weather_button", weather_button)
button_handler.register("admin_only_button", admin_only_button)
button_handler.register("slow_process_button", slow_process_button)

import threading
from datetime import datetime

from buttonbot.button_handlers import ButtonAction, ResponseType, button_handler
from buttonbot.button_manager import ButtonStyle, button_manager
from buttonbot.utils import DEFAULT_TIMEOUT


def _reply(template, response_type=ResponseType.EPHEMERAL):
    async def handler(interaction, env, user_info):
        return button_handler.create_response(template.format(user_name=user_info.user_name), response_type)
    return handler


def create_simple_buttons(manager=button_manager):
    async def info_button(interaction, env, user_info):
        now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return button_handler.create_response(
            f"📊 System info:\n• User: {user_info.user_name}\n• Time: {now}\n• Server: Flask",
            ResponseType.EPHEMERAL
        )

    return [
        manager.create_button(
            label="👍 Like",
            custom_id="like_simple",
            style=ButtonStyle.SUCCESS,
            handler=_reply("🎉 {user_name} liked this! Thanks for the support!"),
        ),
        manager.create_button(
            label="ℹ️ Info",
            custom_id="info_button",
            style=ButtonStyle.PRIMARY,
            handler=info_button,
        ),
        manager.create_button(
            label="🔗 Visit Discord",
            style=ButtonStyle.LINK,
            url="https://discord.com",
        ),
    ]


class Counter:
    def __init__(self):
        self.value = 0
        self._lock = threading.Lock()

    def add(self, delta):
        with self._lock:
            self.value += delta
            return self.value

    def reset(self):
        with self._lock:
            self.value = 0
            return self.value


class CounterAction(ButtonAction):
    """Adds `delta` to the counter, or resets it when `delta` is None."""

    def __init__(self, counter, delta, verb):
        self.counter = counter
        self.delta = delta
        self.verb = verb

    async def handle(self, interaction, env, user_info):
        value = self.counter.reset() if self.delta is None else self.counter.add(self.delta)
        return button_handler.create_response(
            f"📊 {user_info.user_name} {self.verb} the counter! Current count: {value}",
            ResponseType.PUBLIC
        )


def create_counter_buttons(manager=button_manager, counter=None):
    counter = counter or Counter()
    return [
        manager.create_button(
            label="➕ Increase",
            custom_id="counter_plus",
            style=ButtonStyle.SUCCESS,
            handler=CounterAction(counter, 1, "increased"),
        ),
        manager.create_button(
            label="➖ Decrease",
            custom_id="counter_minus",
            style=ButtonStyle.DANGER,
            handler=CounterAction(counter, -1, "decreased"),
        ),
        manager.create_button(
            label="🔄 Reset",
            custom_id="counter_reset",
            style=ButtonStyle.SECONDARY,
            handler=CounterAction(counter, None, "reset"),
        ),
    ]


class VoteTally:
    """One vote per user id."""

    def __init__(self):
        self.yes = 0
        self.no = 0
        self.voters = set()
        self._lock = threading.Lock()

    def cast(self, user_id, choice):
        """
        Records a vote.

        Returns:
            bool: False if the user had already voted.
        """
        with self._lock:
            if user_id in self.voters:
                return False
            self.voters.add(user_id)
            if choice == "yes":
                self.yes += 1
            else:
                self.no += 1
            return True

    def snapshot(self):
        with self._lock:
            return self.yes, self.no, len(self.voters)


class CastVote(ButtonAction):
    def __init__(self, tally, choice):
        self.tally = tally
        self.choice = choice

    async def handle(self, interaction, env, user_info):
        if not self.tally.cast(user_info.user_id, self.choice):
            return button_handler.create_response(
                f"⚠️ {user_info.user_name}, you have already voted!",
                ResponseType.EPHEMERAL
            )
        yes, no, _ = self.tally.snapshot()
        icon = "✅" if self.choice == "yes" else "❌"
        return button_handler.create_response(
            f"{icon} {user_info.user_name} voted {self.choice}!\n📊 Current result: {yes} yes, {no} no",
            ResponseType.PUBLIC
        )


class VoteResults(ButtonAction):
    def __init__(self, tally):
        self.tally = tally

    async def handle(self, interaction, env, user_info):
        yes, no, voters = self.tally.snapshot()
        total = yes + no
        yes_percent = round(yes / total * 100) if total else 0
        no_percent = round(no / total * 100) if total else 0
        return button_handler.create_response(
            f"📊 Vote results:\n✅ Yes: {yes} ({yes_percent}%)\n❌ No: {no} ({no_percent}%)\n"
            f"👥 Voters: {voters}",
            ResponseType.EPHEMERAL
        )


def create_vote_buttons(manager=button_manager, tally=None):
    tally = tally or VoteTally()
    return [
        manager.create_button(
            label="✅ Yes",
            custom_id="vote_yes",
            style=ButtonStyle.SUCCESS,
            handler=CastVote(tally, "yes"),
        ),
        manager.create_button(
            label="❌ No",
            custom_id="vote_no",
            style=ButtonStyle.DANGER,
            handler=CastVote(tally, "no"),
        ),
        manager.create_button(
            label="📊 Results",
            custom_id="vote_results",
            style=ButtonStyle.SECONDARY,
            handler=VoteResults(tally),
        ),
    ]


def create_menu_buttons(manager=button_manager):
    return [
        manager.create_button(
            label="🎮 Games",
            custom_id="menu_games",
            style=ButtonStyle.PRIMARY,
            handler=_reply("🎮 {user_name} opened the games menu!\n• 🎯 Guess the number\n• 🎲 Dice\n• 🃏 Cards"),
        ),
        manager.create_button(
            label="🔧 Tools",
            custom_id="menu_tools",
            style=ButtonStyle.SECONDARY,
            handler=_reply("🔧 {user_name} opened the tools menu!\n• ⏰ Time\n• 🌤️ Weather\n• 🔍 Search"),
        ),
        manager.create_button(
            label="⚙️ Settings",
            custom_id="menu_settings",
            style=ButtonStyle.SECONDARY,
            handler=_reply("⚙️ {user_name} opened the settings menu!\n• 🔔 Notifications\n• 🎨 Theme\n• 🔐 Privacy"),
        ),
        manager.create_button(
            label="❓ Help",
            custom_id="menu_help",
            style=ButtonStyle.SUCCESS,
            handler=_reply("❓ {user_name} opened the help menu!\n• 📚 Tutorials\n• 🆘 Support\n• 📋 FAQ"),
        ),
    ]


def create_delete_confirm_buttons(manager=button_manager):
    async def on_confirm(interaction, env, user_info):
        return button_handler.create_response(
            f"🗑️ {user_info.user_name} confirmed the deletion. The content was deleted.",
            ResponseType.UPDATE,
            []
        )

    async def on_cancel(interaction, env, user_info):
        return button_handler.create_response(
            f"❌ {user_info.user_name} cancelled the deletion.",
            ResponseType.UPDATE,
            []
        )

    return manager.create_confirm_cancel_buttons(
        on_confirm=on_confirm,
        on_cancel=on_cancel,
        confirm_text="🗑️ Delete",
        cancel_text="❌ Cancel",
    )


def create_feedback_buttons(manager=button_manager):
    return [
        manager.create_button(
            label="😊 Good",
            custom_id="feedback_good",
            style=ButtonStyle.SUCCESS,
            handler=_reply("😊 Thanks for the kind words, {user_name}! We'll keep it up."),
        ),
        manager.create_button(
            label="😐 Okay",
            custom_id="feedback_okay",
            style=ButtonStyle.SECONDARY,
            handler=_reply("😐 Thanks for the feedback, {user_name}! We'll keep improving."),
        ),
        manager.create_button(
            label="😞 Bad",
            custom_id="feedback_bad",
            style=ButtonStyle.DANGER,
            handler=_reply("😞 Sorry we let you down, {user_name}! We'll take your feedback seriously."),
        ),
    ]


EXAMPLES = {
    "simple": (create_simple_buttons, "🎉 A simple button example! Click a button to try it:"),
    "counter": (create_counter_buttons, "🔢 A counter example! Increase, decrease or reset the count:"),
    "vote": (create_vote_buttons, "🗳️ A vote example! Cast your vote:"),
    "menu": (create_menu_buttons, "📋 A menu example! Pick a section:"),
    "delete": (create_delete_confirm_buttons, "⚠️ A delete confirmation example! Are you sure?"),
    "feedback": (create_feedback_buttons, "💬 A feedback example! How did we do?"),
    "common": (lambda manager: manager.create_common_buttons(), "⭐ Common buttons: like, favorite, share and report:"),
}


def send_example_message(channel_id, token, example_type="simple", manager=button_manager, timeout=DEFAULT_TIMEOUT):
    """
    Builds one of the example button sets and sends it to a channel.

    Args:
        channel_id (str): Target channel ID.
        token (str): Discord bot token.
        example_type (str): One of the keys of EXAMPLES.
        timeout (float): Request timeout in seconds.

    Returns:
        dict: Discord's message object.

    Raises:
        ValueError: If the example type is unknown.
        DiscordAPIError: If Discord rejects the message.
    """
    if example_type not in EXAMPLES:
        raise ValueError(f"Unknown example type: {example_type}")

    factory, content = EXAMPLES[example_type]
    buttons = factory(manager)
    return manager.send_message_with_buttons(channel_id, content, buttons, token, timeout=timeout)

from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import make_interaction

from buttonbot import custom_buttons
from buttonbot.button_handlers import ResponseType, UserInfo, button_handler


@pytest.mark.asyncio
async def test_custom_handlers_are_registered():
    for custom_id in ("hello_button", "server_info_button", "weather_button",
                      "admin_only_button", "slow_process_button"):
        assert button_handler.get_handler(custom_id) is not None


@pytest.mark.asyncio
async def test_server_info_uses_event_ids():
    interaction = make_interaction("server_info_button", username="lee")
    response = await custom_buttons.server_info_button(interaction, {}, UserInfo("lee", "1"))
    assert "333333333333333333" in response.content
    assert "444444444444444444" in response.content


@pytest.mark.asyncio
async def test_admin_only_without_config():
    response = await custom_buttons.admin_only_button({}, {}, UserInfo("max", "1"))
    assert "admins only" in response.content


@pytest.mark.asyncio
async def test_slow_process_defers_and_schedules_follow_up():
    interaction = make_interaction("slow_process_button", username="liz")
    with patch("buttonbot.custom_buttons.threading.Thread") as thread:
        response = await custom_buttons.slow_process_button(interaction, {"DISCORD_APP_ID": "app"}, UserInfo("liz", "1"))

    assert response.response_type == ResponseType.DEFERRED
    assert response.to_dict() == {"type": 5, "data": {"flags": 64}}
    assert thread.call_args.kwargs["args"] == ("app", "interaction-token", "liz")
    assert thread.call_args.kwargs["kwargs"] == {"timeout": 10}
    thread.return_value.start.assert_called_once()


@pytest.mark.asyncio
async def test_slow_process_without_app_id_skips_follow_up():
    with patch("buttonbot.custom_buttons.threading.Thread") as thread:
        response = await custom_buttons.slow_process_button({}, {}, UserInfo("liz", "1"))
    assert response.response_type == ResponseType.DEFERRED
    thread.assert_not_called()


def test_finish_slow_process_posts_follow_up():
    reply = MagicMock(ok=True, status_code=200)
    with patch("buttonbot.utils.requests.post", return_value=reply) as post:
        custom_buttons.finish_slow_process("app", "tok", "liz", delay=0)
    assert post.call_args.args[0].endswith("/webhooks/app/tok")
    assert "liz" in post.call_args.kwargs["json"]["content"]


def test_finish_slow_process_logs_discord_errors(caplog):
    reply = MagicMock(ok=False, status_code=404, text="Unknown Webhook")
    with patch("buttonbot.utils.requests.post", return_value=reply):
        custom_buttons.finish_slow_process("app", "tok", "liz", delay=0)

    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert len(errors) == 1
    assert "Error sending slow process result" in errors[0].getMessage()
    assert "Unknown Webhook" in errors[0].getMessage()


def test_finish_slow_process_logs_connection_errors(caplog):
    with patch("buttonbot.utils.requests.post", side_effect=requests.ConnectionError("network down")):
        custom_buttons.finish_slow_process("app", "tok", "liz", delay=0)

    assert any("network down" in r.getMessage() for r in caplog.records if r.levelname == "ERROR")


@pytest.mark.asyncio
async def test_slow_process_passes_configured_timeout():
    interaction = make_interaction("slow_process_button", username="liz")
    env = {"DISCORD_APP_ID": "app", "DISCORD_HTTP_TIMEOUT": 2.5}
    with patch("buttonbot.custom_buttons.threading.Thread") as thread:
        await custom_buttons.slow_process_button(interaction, env, UserInfo("liz", "1"))
    assert thread.call_args.kwargs["kwargs"] == {"timeout": 2.5}


def test_finish_slow_process_uses_timeout():
    reply = MagicMock(ok=True, status_code=200)
    with patch("buttonbot.utils.requests.post", return_value=reply) as post:
        custom_buttons.finish_slow_process("app", "tok", "liz", delay=0, timeout=2.5)
    assert post.call_args.kwargs["timeout"] == 2.5


def test_vote_board_counts():
    board = custom_buttons.VoteBoard()
    assert board.vote("yes") == (1, 0)
    assert board.vote("no") == (1, 1)

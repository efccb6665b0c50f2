import os
import sys
import time
import json

import pytest
from nacl.signing import SigningKey

# Add parent directory to path so `config` and `buttonbot` import without installing
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from buttonbot import create_app  # noqa: E402


@pytest.fixture
def signing_key():
    return SigningKey.generate()


@pytest.fixture
def app(signing_key):
    app = create_app({
        "TESTING": True,
        "DISCORD_PUBLIC_KEY": signing_key.verify_key.encode().hex(),
        "DISCORD_TOKEN": "test-token",
        "DISCORD_APP_ID": "123456789012345678",
        "ADMIN_USER_IDS": ["111111111111111111"],
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_post(client, signing_key):
    """POSTs a JSON body to the interactions endpoint with a valid Discord signature."""

    def post(payload):
        body = json.dumps(payload).encode()
        timestamp = str(int(time.time()))
        signature = signing_key.sign(timestamp.encode() + body).signature.hex()
        return client.post(
            "/",
            data=body,
            content_type="application/json",
            headers={"X-Signature-Ed25519": signature, "X-Signature-Timestamp": timestamp},
        )

    return post


def make_interaction(custom_id, username="alice", user_id="222222222222222222", in_guild=True):
    interaction = {
        "type": 3,
        "token": "interaction-token",
        "guild_id": "333333333333333333",
        "channel_id": "444444444444444444",
        "data": {"custom_id": custom_id, "component_type": 2},
    }
    user = {"username": username, "id": user_id}
    if in_guild:
        interaction["member"] = {"user": user}
    else:
        interaction["user"] = user
    return interaction

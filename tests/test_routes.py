import json

from conftest import make_interaction

from buttonbot import routes as routes_module
from buttonbot.button_handlers import ButtonHandler


class TestSignature:
    def test_missing_headers_rejected(self, client):
        response = client.post("/", json={"type": 1})
        assert response.status_code == 401
        assert response.get_json() == {"error": "Invalid request signature"}

    def test_bad_signature_rejected(self, client):
        response = client.post(
            "/",
            data=json.dumps({"type": 1}),
            content_type="application/json",
            headers={"X-Signature-Ed25519": "00" * 64, "X-Signature-Timestamp": "1700000000"},
        )
        assert response.status_code == 401

    def test_tampered_body_rejected(self, client, signing_key):
        timestamp = "1700000000"
        signature = signing_key.sign(timestamp.encode() + b'{"type": 1}').signature.hex()
        response = client.post(
            "/",
            data='{"type": 3}',
            content_type="application/json",
            headers={"X-Signature-Ed25519": signature, "X-Signature-Timestamp": timestamp},
        )
        assert response.status_code == 401


class TestInteractions:
    def test_ping(self, signed_post):
        response = signed_post({"type": 1})
        assert response.status_code == 200
        assert response.get_json() == {"type": 1}

    def test_registered_button(self, signed_post):
        response = signed_post(make_interaction("hello_button", username="nora"))
        body = response.get_json()
        assert response.status_code == 200
        assert body["type"] == 4
        assert body["data"]["flags"] == 64
        assert "nora" in body["data"]["content"]

    def test_unregistered_button_gets_default(self, signed_post):
        body = signed_post(make_interaction("no_such_button", username="otto")).get_json()
        assert body["type"] == 4
        assert "otto" in body["data"]["content"]
        assert "no_such_button" in body["data"]["content"]

    def test_failing_handler_still_answers(self, signed_post, monkeypatch):
        registry = ButtonHandler()

        async def broken(interaction, env, user_info):
            raise RuntimeError("boom")

        registry.register("broken", broken)
        monkeypatch.setattr(routes_module, "button_handler", registry)

        response = signed_post(make_interaction("broken"))
        body = response.get_json()
        assert response.status_code == 200
        assert "boom" in body["data"]["content"]
        assert "broken" in body["data"]["content"]

    def test_handler_sees_app_config(self, signed_post):
        admin = signed_post(make_interaction("admin_only_button", user_id="111111111111111111")).get_json()
        other = signed_post(make_interaction("admin_only_button", user_id="999")).get_json()
        assert "admin mode activated" in admin["data"]["content"]
        assert "admins only" in other["data"]["content"]

    def test_unknown_interaction_type(self, signed_post):
        response = signed_post({"type": 2, "data": {"name": "ping"}})
        assert response.status_code == 400


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.data == b"OK"

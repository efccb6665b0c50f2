"""
Smoke test for the custom API of a running bot.

Usage:
    python scripts/api_test.py --base-url http://localhost:8080 --channel-id 123456789012345678
"""
import argparse
import logging
import sys

import requests

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)


def make_request(method, url, payload=None):
    response = requests.request(method, url, json=payload, timeout=15)
    logging.info(f"{method} {url} -> {response.status_code}")
    try:
        logging.info(response.json())
    except ValueError:
        logging.info(response.text)
    return response.ok


def run(base_url, channel_id):
    custom = f"{base_url.rstrip('/')}/custom"
    checks = [
        ("GET", f"{custom}/hello", None),
        ("GET", f"{custom}/docs", None),
        ("GET", f"{custom}/channel/{channel_id}", None),
        ("POST", f"{custom}/send-message", {
            "channelId": channel_id,
            "content": "Hello from the API test script!",
        }),
        ("POST", f"{custom}/send-message-with-buttons", {
            "channelId": channel_id,
            "content": "Pick one:",
            "buttons": [
                {"label": "✅ Confirm", "custom_id": "confirm_action", "style": 3},
                {"label": "❌ Cancel", "custom_id": "cancel_action", "style": 4},
                {"label": "📖 Docs", "url": "https://discord.com/developers/docs", "style": 5},
            ],
        }),
        ("POST", f"{custom}/send-demo-buttons", {
            "channelId": channel_id,
            "content": "Demo buttons from the API test script 🎉",
        }),
        ("POST", f"{custom}/send-example", {"channelId": channel_id, "exampleType": "vote"}),
        # Expected to fail validation
        ("POST", f"{custom}/send-message", {"channelId": "not-an-id", "content": "x"}),
    ]

    failures = 0
    for method, url, payload in checks[:-1]:
        if not make_request(method, url, payload):
            failures += 1

    method, url, payload = checks[-1]
    if make_request(method, url, payload):
        logging.error("Invalid channelId was accepted")
        failures += 1
    return failures


def main():
    parser = argparse.ArgumentParser(description="Exercise the bot's custom API")
    parser.add_argument("--base-url", default="http://localhost:8080")
    parser.add_argument("--channel-id", required=True)
    args = parser.parse_args()

    failures = run(args.base_url, args.channel_id)
    logging.info(f"Done, {failures} failed check(s)")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()

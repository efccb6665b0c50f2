import os

PORT = int(os.getenv("PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Discord credentials
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
DISCORD_PUBLIC_KEY = os.getenv("DISCORD_PUBLIC_KEY")
DISCORD_APP_ID = os.getenv("DISCORD_APP_ID")

DISCORD_HTTP_TIMEOUT = float(os.getenv("DISCORD_HTTP_TIMEOUT", 10))

# Users allowed to press admin_only_button
ADMIN_USER_IDS = [uid.strip() for uid in os.getenv("ADMIN_USER_IDS", "").split(",") if uid.strip()]

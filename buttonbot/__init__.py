import logging

from flask import Flask


def create_app(overrides=None):
    """
    Builds the Flask application with both blueprints registered.

    Args:
        overrides (dict): Config values applied on top of config.py (used by tests).

    Returns:
        Flask: The configured application.
    """
    app = Flask(__name__)
    app.config.from_object("config")
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )

    # Importing registers the custom button handlers on the shared registry
    from buttonbot import custom_buttons  # noqa: F401
    from buttonbot.routes import routes
    from buttonbot.custom_routes import custom_routes

    app.register_blueprint(routes)
    app.register_blueprint(custom_routes)
    return app

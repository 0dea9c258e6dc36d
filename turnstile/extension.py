import logging
from functools import partial

from flask import current_app, has_app_context

from turnstile.configuration import get_configuration
from turnstile.views import turnstile_tags

logger = logging.getLogger(__name__)

# app.config key -> configuration field
CONFIG_KEYS = {
    "TURNSTILE_SECRET_KEY": "secret_key",
    "TURNSTILE_SITE_KEY": "site_key",
    "TURNSTILE_VERIFY_URL": "verify_url",
    "TURNSTILE_API_SERVER_URL": "api_server_url",
    "TURNSTILE_PROXY": "proxy",
    "TURNSTILE_HOSTNAME": "hostname",
    "TURNSTILE_ACTION": "action",
    "TURNSTILE_RESPONSE_LIMIT": "response_limit",
    "TURNSTILE_SKIP_VERIFY_ENV": "skip_verify_env",
    "TURNSTILE_DEFAULT_ENV": "default_env",
    "TURNSTILE_HANDLE_TIMEOUTS_GRACEFULLY": "handle_timeouts_gracefully",
}


class Turnstile:
    """
    Flask extension wiring the Turnstile configuration into an app.

        turnstile = Turnstile(app)

    or with an application factory::

        turnstile = Turnstile()
        turnstile.init_app(app)
    """

    def __init__(self, app=None, configuration=None):
        self.configuration = configuration
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        config = self.configuration or get_configuration()
        self.configuration = config

        for app_key, field in CONFIG_KEYS.items():
            if app_key in app.config:
                value = app.config[app_key]
                if field == "skip_verify_env":
                    value = set(value)
                config.set(field, value)

        if "TURNSTILE_DEFAULT_ENV" not in app.config and app.config.get("ENV"):
            config.set("default_env", app.config["ENV"])

        if not config.secret_key:
            logger.warning("TURNSTILE_SECRET_KEY not set; verification will fail")

        app.extensions["turnstile"] = self

        @app.context_processor
        def inject_turnstile():
            return dict(
                turnstile_tags=partial(turnstile_tags, configuration=config),
                turnstile_site_key=config.site_key,
            )


def current_configuration():
    """
    The configuration of the Turnstile extension registered on the current
    app, or the process-wide one outside an app or without the extension.
    """
    if has_app_context():
        ext = current_app.extensions.get("turnstile")
        if ext is not None and ext.configuration is not None:
            return ext.configuration
    return get_configuration()

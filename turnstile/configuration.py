"""
Process-wide Turnstile settings and scoped overrides.

The configuration object is plain mutable state with no locking. Hosts that
verify from several threads should pass per-call options to ``verify``
instead of overriding the shared configuration.
"""
import os
import logging
from contextlib import contextmanager

from dotenv import find_dotenv, load_dotenv

from turnstile.errors import ConfigurationError, MissingSecretError, MissingSiteKeyError

logger = logging.getLogger(__name__)

VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
API_SERVER_URL = "https://challenges.cloudflare.com/turnstile/v0/api.js"

# Cloudflare tokens are at most 2048 characters
RESPONSE_LIMIT = 2048

FIELDS = (
    "secret_key",
    "site_key",
    "verify_url",
    "api_server_url",
    "default_env",
    "skip_verify_env",
    "response_limit",
    "proxy",
    "hostname",
    "action",
    "handle_timeouts_gracefully",
)


class Configuration:
    """
    Holds every Turnstile setting.

    - secret_key / site_key: the key pair issued by Cloudflare
    - verify_url: siteverify endpoint the tokens are posted to
    - api_server_url: widget script included by the view helper
    - default_env: environment used when a caller passes none
    - skip_verify_env: environments where verification always passes
    - response_limit: longest token accepted before it is rejected outright
    - proxy: optional proxy URL, credentials may be embedded
    - hostname / action: validation rules applied to the reply
    - handle_timeouts_gracefully: Flask helpers turn timeouts into a failed check

    Values are not validated when set; a bad URL only fails when used.
    """

    def __init__(self, **settings):
        self.secret_key = None
        self.site_key = None
        self.verify_url = VERIFY_URL
        self.api_server_url = API_SERVER_URL
        self.default_env = None
        self.skip_verify_env = {"test"}
        self.response_limit = RESPONSE_LIMIT
        self.proxy = None
        self.hostname = None
        self.action = None
        self.handle_timeouts_gracefully = True

        for key, value in settings.items():
            self.set(key, value)

    @classmethod
    def from_env(cls):
        # search from the host app's working directory, not this package
        load_dotenv(find_dotenv(usecwd=True))

        settings = {
            "secret_key": os.environ.get("TURNSTILE_SECRET_KEY"),
            "site_key": os.environ.get("TURNSTILE_SITE_KEY"),
            "proxy": os.environ.get("TURNSTILE_PROXY"),
            "default_env": os.environ.get("ENV") or os.environ.get("FLASK_ENV"),
        }
        if os.environ.get("TURNSTILE_VERIFY_URL"):
            settings["verify_url"] = os.environ["TURNSTILE_VERIFY_URL"]

        return cls(**settings)

    def get(self, key):
        if key not in FIELDS:
            raise ConfigurationError(f"unknown configuration field {key!r}")
        return getattr(self, key)

    def set(self, key, value):
        if key not in FIELDS:
            raise ConfigurationError(f"unknown configuration field {key!r}")
        setattr(self, key, value)

    def require_secret_key(self) -> str:
        if not self.secret_key:
            raise MissingSecretError()
        return self.secret_key

    def require_site_key(self) -> str:
        if not self.site_key:
            raise MissingSiteKeyError()
        return self.site_key

    def __repr__(self):
        # never print the secret
        return "<Configuration verify_url={0!r} default_env={1!r}>".format(
            self.verify_url, self.default_env)


_configuration = None


def get_configuration() -> Configuration:
    global _configuration
    if _configuration is None:
        _configuration = Configuration.from_env()
    return _configuration


def configure(**settings) -> Configuration:
    config = get_configuration()
    for key, value in settings.items():
        config.set(key, value)
    return config


@contextmanager
def override(configuration=None, **overrides):
    """
    Temporarily replace configuration values for the body of a ``with`` block.

    Every key that was applied is put back exactly once, whether the block
    returns or raises. An unknown key raises ConfigurationError when reached;
    keys applied before it are still restored.
    """
    config = configuration or get_configuration()
    original = {}

    try:
        for key, value in overrides.items():
            previous = config.get(key)
            config.set(key, value)
            original[key] = previous
        yield config
    finally:
        for key, value in original.items():
            config.set(key, value)
        if original:
            logger.debug("Restored Turnstile configuration keys: %s", ", ".join(original))


def with_configuration(overrides, action=None, configuration=None):
    """
    Run ``action`` with ``overrides`` applied and return its result.

    Without an action the overrides are applied and immediately restored.
    """
    with override(configuration, **overrides):
        if action is not None:
            return action()
    return None

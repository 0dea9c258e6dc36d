import logging
from urllib.parse import urlsplit, urlunsplit

import requests

from turnstile.configuration import get_configuration
from turnstile.errors import VerifyError
from turnstile.helpers import action_valid, hostname_valid

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3

# form field the widget posts its token under
RESPONSE_FIELD = "cf-turnstile-response"

_UNSET = object()


class HttpClient:
    """
    Thin wrapper around a requests session used for siteverify calls.
    """

    def __init__(self, session=None, proxy=None, timeout=DEFAULT_TIMEOUT):
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        # passed per request, an injected session is never modified
        self.proxies = {"http": proxy, "https": proxy} if proxy else None

    def post_form(self, url: str, data: dict):
        # status codes are not inspected; the body is always parsed
        resp = self.session.post(
            url,
            data=data,
            timeout=(self.timeout, self.timeout),
            proxies=self.proxies,
        )
        return resp.json()

    def close(self):
        if self._owns_session:
            self.session.close()


class Verifier:
    """
    Server-side verification of Turnstile tokens.

    Network errors, timeouts and malformed JSON propagate to the caller
    untouched. A ``False`` result means Cloudflare (or a hostname/action
    rule) rejected the token.
    """

    def __init__(self, configuration=None, session=None):
        self.configuration = configuration or get_configuration()
        self.session = session

    def skip_env(self, env: str | None = None) -> bool:
        if env is None:
            env = self.configuration.default_env
        return env in self.configuration.skip_verify_env

    def invalid_response(self, response: str | None) -> bool:
        return not response or len(response) > self.configuration.response_limit

    def request_url(self) -> str:
        parts = urlsplit(self.configuration.verify_url)
        if parts.scheme == "http" and parts.port == 443:
            parts = parts._replace(scheme="https")
        return urlunsplit(parts)

    def http_client_for(self, timeout=None) -> HttpClient:
        timeout = timeout or DEFAULT_TIMEOUT
        return HttpClient(
            session=self.session,
            proxy=self.configuration.proxy,
            timeout=timeout,
        )

    def api_verification(self, payload: dict, timeout=None) -> dict:
        # The per-call timeout is not forwarded: the default always applies.
        client = self.http_client_for(timeout=None)
        try:
            reply = client.post_form(self.request_url(), payload)
        finally:
            client.close()

        if not isinstance(reply, dict):
            raise VerifyError(f"unexpected siteverify reply: {reply!r}")
        return reply

    def verify(
        self,
        response: str,
        secret_key: str | None = None,
        remote_ip: str | None = None,
        hostname=None,
        action=_UNSET,
        timeout=None,
        with_reply=False,
    ):
        """
        Check ``response`` against the siteverify endpoint.

        ``hostname`` and ``action`` override the configured rules for this
        call only, so concurrent callers never have to touch the shared
        configuration. Returns ``(result, reply)`` when ``with_reply`` is True.
        """
        if secret_key is None:
            secret_key = self.configuration.require_secret_key()

        payload = {"secret": secret_key, "response": response}
        if remote_ip is not None:
            payload["remoteip"] = remote_ip

        if action is _UNSET:
            action = self.configuration.action

        reply = self.api_verification(payload, timeout=timeout)

        success = _stringify(reply.get("success")) == "true"
        result = (
            success
            and hostname_valid(reply.get("hostname"), hostname, self.configuration)
            and action_valid(reply.get("action"), action)
        )
        logger.debug(
            "Turnstile verification: success=%s result=%s error-codes=%s",
            success, result, reply.get("error-codes"),
        )

        if with_reply is True:
            return result, reply
        return result


def _stringify(value) -> str:
    # JSON true must compare like the string "true"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def verify_via_api_call(response: str, **options):
    return Verifier().verify(response, **options)


def skip_env(env: str | None = None) -> bool:
    return Verifier().skip_env(env)


def invalid_response(response: str | None) -> bool:
    return Verifier().invalid_response(response)

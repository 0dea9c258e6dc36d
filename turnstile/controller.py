"""
Request-level helpers for Flask views.
"""
import logging
from functools import wraps

import requests
from flask import abort, flash, g, request

from turnstile.captcha import RESPONSE_FIELD, Verifier
from turnstile.errors import ParseError, VerifyError
from turnstile.extension import current_configuration

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "CAPTCHA verification failed, please try again."
TIMEOUT_MESSAGE = "CAPTCHA verification timed out, please try again."


def _flash(message, default):
    if message is False:
        return
    flash(message or default, "danger")


def verify_turnstile(response=None, env=None, message=None, **options) -> bool:
    """
    Verify the token posted with the current request.

    Passes outright in a skip environment. Flashes ``message`` (or a default)
    when the check fails; ``message=False`` disables flashing. The parsed
    reply is kept on ``flask.g`` for the rest of the request.
    """
    verifier = Verifier(current_configuration())
    if verifier.skip_env(env):
        return True

    token = response if response is not None else request.form.get(RESPONSE_FIELD)
    if verifier.invalid_response(token):
        logger.warning("Turnstile token missing or too long IP=%s", request.remote_addr)
        _flash(message, DEFAULT_MESSAGE)
        return False

    options.setdefault("remote_ip", request.remote_addr)
    options["with_reply"] = True

    try:
        success, reply = verifier.verify(token, **options)
    except requests.Timeout:
        if not verifier.configuration.handle_timeouts_gracefully:
            raise
        logger.warning("Turnstile verification timed out IP=%s", request.remote_addr)
        _flash(message, TIMEOUT_MESSAGE)
        return False
    except (requests.RequestException, ParseError) as exc:
        logger.exception("Turnstile verification could not be completed")
        raise VerifyError(str(exc)) from exc

    g.turnstile_reply = reply

    if not success:
        logger.warning(
            "Turnstile verification failed IP=%s error-codes=%s",
            request.remote_addr, reply.get("error-codes"),
        )
        _flash(message, DEFAULT_MESSAGE)

    return success


def turnstile_reply():
    return g.get("turnstile_reply")


def turnstile_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not verify_turnstile():
            abort(400)
        return f(*args, **kwargs)
    return wrapper

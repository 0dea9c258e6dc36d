import logging

from flask import request
from wtforms.validators import ValidationError

from turnstile.captcha import Verifier
from turnstile.extension import current_configuration

logger = logging.getLogger(__name__)


class TurnstileValid:
    """
    WTForms validator checking the field's token with Cloudflare.

    - Passes without a network call in a skip environment
    - Rejects missing or over-long tokens before contacting Cloudflare
    - Extra keyword arguments go to ``Verifier.verify`` (hostname, action, ...)

    Transport errors are not caught here.
    """

    def __init__(self, message=None, **options):
        self.message = message or "Please complete the CAPTCHA."
        self.options = options

    def __call__(self, form, field):
        verifier = Verifier(current_configuration())
        if verifier.skip_env():
            return

        token = field.data or ""
        if verifier.invalid_response(token):
            raise ValidationError(self.message)

        options = dict(self.options)
        options.setdefault("remote_ip", request.remote_addr)

        if not verifier.verify(token, **options):
            logger.warning("Turnstile token rejected for field %s", field.name)
            raise ValidationError(self.message)

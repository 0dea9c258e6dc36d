from requests.exceptions import JSONDecodeError


class TurnstileError(Exception):
    pass


class ConfigurationError(TurnstileError):
    pass


class MissingSecretError(ConfigurationError):
    def __init__(self):
        super().__init__("Turnstile secret key is not set")


class MissingSiteKeyError(ConfigurationError):
    def __init__(self):
        super().__init__("Turnstile site key is not set")


class VerifyError(TurnstileError):
    pass


# Malformed siteverify bodies surface as the transport's own exception.
ParseError = JSONDecodeError

from turnstile.captcha import (
    DEFAULT_TIMEOUT,
    RESPONSE_FIELD,
    HttpClient,
    Verifier,
    invalid_response,
    skip_env,
    verify_via_api_call,
)
from turnstile.configuration import (
    Configuration,
    configure,
    get_configuration,
    override,
    with_configuration,
)
from turnstile.errors import (
    ConfigurationError,
    MissingSecretError,
    MissingSiteKeyError,
    ParseError,
    TurnstileError,
    VerifyError,
)
from turnstile.extension import Turnstile
from turnstile.helpers import (
    Literal,
    NoCheck,
    Predicate,
    ValidationRule,
    action_valid,
    as_rule,
    hostname_valid,
)

verify = verify_via_api_call

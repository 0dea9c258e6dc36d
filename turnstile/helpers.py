"""
Rules deciding whether the hostname/action in a siteverify reply is acceptable.
"""
from turnstile.configuration import get_configuration
from turnstile.errors import ConfigurationError


class ValidationRule:
    def matches(self, actual) -> bool:
        raise NotImplementedError


class NoCheck(ValidationRule):
    def matches(self, actual) -> bool:
        return True

    def __repr__(self):
        return "NoCheck()"


class Literal(ValidationRule):
    def __init__(self, value):
        self.value = value

    def matches(self, actual) -> bool:
        # exact, case-sensitive comparison
        return actual == self.value

    def __repr__(self):
        return f"Literal({self.value!r})"


class Predicate(ValidationRule):
    def __init__(self, func):
        self.func = func

    def matches(self, actual) -> bool:
        return bool(self.func(actual))

    def __repr__(self):
        return f"Predicate({self.func!r})"


def _is_unset(value) -> bool:
    return value is None or value is False


def as_rule(value) -> ValidationRule:
    """
    Normalise a configured rule: None/False, a literal string, or a callable.
    """
    if isinstance(value, ValidationRule):
        return value
    if _is_unset(value):
        return NoCheck()
    if isinstance(value, str):
        return Literal(value)
    if callable(value):
        return Predicate(value)

    raise ConfigurationError(f"invalid validation rule {value!r}")


def hostname_valid(hostname, validation=None, configuration=None) -> bool:
    if validation is None:
        validation = (configuration or get_configuration()).hostname
    return as_rule(validation).matches(hostname)


def action_valid(action, expected_action) -> bool:
    if isinstance(expected_action, ValidationRule):
        return expected_action.matches(action)
    if _is_unset(expected_action):
        return True
    return action == expected_action

from flask_wtf import FlaskForm
from wtforms import Field

from turnstile.extension import current_configuration
from turnstile.validators import TurnstileValid
from turnstile.views import turnstile_tags


class TurnstileWidget:
    # the widget posts its token under the field's own name
    def __call__(self, field, **kwargs):
        kwargs.setdefault("response_field_name", field.name)
        kwargs.setdefault("configuration", current_configuration())
        return turnstile_tags(**kwargs)


class TurnstileField(Field):
    widget = TurnstileWidget()

    def __init__(self, label="", validators=None, **kwargs):
        validators = validators or [TurnstileValid()]
        super().__init__(label, validators, **kwargs)

    def _value(self):
        return self.data or ""


class TurnstileForm(FlaskForm):
    turnstile = TurnstileField()

import pytest
import requests
from flask import get_flashed_messages
from werkzeug.exceptions import BadRequest

from turnstile import RESPONSE_FIELD, Configuration, Turnstile, VerifyError
from turnstile.controller import (
    DEFAULT_MESSAGE,
    TIMEOUT_MESSAGE,
    turnstile_reply,
    turnstile_required,
    verify_turnstile,
)


def post_context(app, token="token", **kwargs):
    data = {RESPONSE_FIELD: token} if token is not None else {}
    return app.test_request_context(
        "/", method="POST", data=data, environ_base={"REMOTE_ADDR": "203.0.113.9"}, **kwargs
    )


def test_success_reads_form_and_remote_addr(app, patched_session):
    with post_context(app):
        assert verify_turnstile() is True
        assert turnstile_reply() == {"success": True}
        assert get_flashed_messages() == []

    data = patched_session.post.call_args.kwargs["data"]
    assert data == {"secret": "secret-key", "response": "token", "remoteip": "203.0.113.9"}


def test_failure_flashes(app, patched_session, reply):
    reply({"success": False, "error-codes": ["invalid-input-response"]})
    with post_context(app):
        assert verify_turnstile() is False
        assert get_flashed_messages(with_categories=True) == [("danger", DEFAULT_MESSAGE)]
        assert turnstile_reply()["error-codes"] == ["invalid-input-response"]


def test_custom_and_disabled_message(app, patched_session, reply):
    reply({"success": False})
    with post_context(app):
        assert verify_turnstile(message="Nope") is False
        assert get_flashed_messages() == ["Nope"]

    with post_context(app):
        assert verify_turnstile(message=False) is False
        assert get_flashed_messages() == []


def test_missing_token_skips_network(app, patched_session):
    with post_context(app, token=None):
        assert verify_turnstile() is False
        assert get_flashed_messages() == [DEFAULT_MESSAGE]
    patched_session.post.assert_not_called()


def test_overlong_token_rejected(app, config, patched_session):
    config.response_limit = 5
    with post_context(app, token="x" * 6):
        assert verify_turnstile() is False
    patched_session.post.assert_not_called()


def test_skip_env(app, config, patched_session):
    with post_context(app, token=None):
        assert verify_turnstile(env="test") is True

    config.default_env = "test"
    with post_context(app, token=None):
        assert verify_turnstile() is True

    patched_session.post.assert_not_called()


def test_explicit_response_and_options(app, patched_session, reply):
    reply({"success": True, "hostname": "example.com"})
    with post_context(app, token=None):
        assert verify_turnstile(response="given", hostname="example.com", remote_ip="10.0.0.1") is True
        assert verify_turnstile(response="given", hostname="other.com") is False

    data = patched_session.post.call_args.kwargs["data"]
    assert data["response"] == "given"


def test_timeout_handled_gracefully(app, patched_session):
    patched_session.post.side_effect = requests.Timeout()
    with post_context(app):
        assert verify_turnstile() is False
        assert get_flashed_messages() == [TIMEOUT_MESSAGE]
        assert turnstile_reply() is None


def test_timeout_raised_when_not_graceful(app, config, patched_session):
    config.handle_timeouts_gracefully = False
    patched_session.post.side_effect = requests.Timeout()
    with post_context(app):
        with pytest.raises(requests.Timeout):
            verify_turnstile()


def test_transport_error_becomes_verify_error(app, patched_session):
    patched_session.post.side_effect = requests.ConnectionError("refused")
    with post_context(app):
        with pytest.raises(VerifyError) as excinfo:
            verify_turnstile()
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_required_decorator(app, patched_session, reply):
    @turnstile_required
    def view():
        return "ok"

    with post_context(app):
        assert view() == "ok"

    reply({"success": False})
    with post_context(app):
        with pytest.raises(BadRequest):
            view()


def test_uses_extension_configuration(app, config, patched_session):
    cfg = Configuration(default_env="production")
    app.config.update(TURNSTILE_SECRET_KEY="app-secret", TURNSTILE_RESPONSE_LIMIT=10)
    Turnstile(app, configuration=cfg)

    with post_context(app):
        assert verify_turnstile() is True
    assert patched_session.post.call_args.kwargs["data"]["secret"] == "app-secret"

    patched_session.post.reset_mock()
    with post_context(app, token="x" * 11):
        assert verify_turnstile() is False
    patched_session.post.assert_not_called()
    assert config.secret_key == "secret-key"

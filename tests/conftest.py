from unittest.mock import MagicMock

import pytest
from flask import Flask

import turnstile.configuration
from turnstile import Configuration


@pytest.fixture
def config(monkeypatch):
    """A fresh process-wide configuration for each test."""
    cfg = Configuration(secret_key="secret-key", site_key="site-key", default_env="production")
    monkeypatch.setattr(turnstile.configuration, "_configuration", cfg)
    return cfg


@pytest.fixture
def session():
    sess = MagicMock()
    sess.proxies = {}
    sess.post.return_value.json.return_value = {"success": True}
    return sess


@pytest.fixture
def reply(session):
    """Set the JSON body the fake siteverify endpoint answers with."""
    def _reply(body):
        session.post.return_value.json.return_value = body
        return body
    return _reply


@pytest.fixture
def patched_session(monkeypatch, session):
    """Make every Verifier built without a session use the fake one."""
    monkeypatch.setattr("turnstile.captcha.requests.Session", lambda: session)
    return session


@pytest.fixture
def app(config):
    app = Flask(__name__)
    app.config.update(SECRET_KEY="test", TESTING=True, WTF_CSRF_ENABLED=False)
    return app

from __future__ import annotations

import requests

from sanctuary.constants import NETWORK_ERROR_MESSAGE
from sanctuary.data.backend import AuthError, Identity

GATE_SETUP = "setup"
GATE_LOGIN = "login"
GATE_APP = "app"

NETWORK_ERROR_MARKERS = ("failed to fetch", "connection")


def resolve_gate(settings, identity: Identity | None) -> str:
    if not settings.is_configured:
        return GATE_SETUP
    if identity is None:
        return GATE_LOGIN
    return GATE_APP


def friendly_auth_error(exc: Exception) -> str:
    if isinstance(exc, requests.ConnectionError) or isinstance(exc.__cause__, requests.ConnectionError):
        return NETWORK_ERROR_MESSAGE
    text = str(exc)
    if any(marker in text.lower() for marker in NETWORK_ERROR_MARKERS):
        return NETWORK_ERROR_MESSAGE
    return getattr(exc, "message", None) or text


def sign_in(backend, email, password) -> Identity:
    return backend.sign_in(str(email or "").strip(), password)


def sign_up(backend, email, password, confirm_password, role) -> Identity:
    if password != confirm_password:
        raise AuthError("Passwords do not match")
    return backend.sign_up(str(email or "").strip(), password, role=role)

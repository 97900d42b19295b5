"""Google ID token verification via the public tokeninfo endpoint."""

import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)

TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"


class GoogleAuthError(Exception):
    """Token rejected by Google or missing required claims."""


class GoogleUnavailableError(Exception):
    """Google could not be reached."""


def verify_google_token(id_token: str) -> dict:
    """Verify an ID token and return ``{google_id, email, name, picture}``.

    The audience is checked against ``GOOGLE_CLIENT_ID`` when configured.
    """
    try:
        resp = requests.get(TOKENINFO_URL, params={"id_token": id_token}, timeout=10)
    except requests.RequestException as e:
        logger.error(f"Google tokeninfo request failed: {e}")
        raise GoogleUnavailableError("Could not reach Google") from e

    if not resp.ok:
        raise GoogleAuthError("Invalid Google token")

    info = resp.json()

    client_id = current_app.config.get("GOOGLE_CLIENT_ID")
    if client_id and info.get("aud") != client_id:
        raise GoogleAuthError("Token audience mismatch")

    google_id = info.get("sub")
    email = (info.get("email") or "").strip().lower()
    if not google_id or not email:
        raise GoogleAuthError("Google did not return the account email")

    return {
        "google_id": google_id,
        "email": email,
        "email_verified": str(info.get("email_verified", "")).lower() == "true",
        "name": (info.get("name") or email.split("@")[0]).strip(),
        "picture": info.get("picture"),
    }

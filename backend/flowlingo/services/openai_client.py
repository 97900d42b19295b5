"""OpenAI client factory with proxy support."""

import httpx
from flask import current_app
from openai import OpenAI


def get_openai_client():
    """
    Create an OpenAI client, routed through ``OPENAI_PROXY`` when set.

    Returns None when no API key is configured.
    """
    api_key = current_app.config.get("OPENAI_API_KEY")
    if not api_key:
        return None

    proxy_url = current_app.config.get("OPENAI_PROXY")
    if proxy_url:
        current_app.logger.info("OpenAI client initialized with proxy")
        return OpenAI(api_key=api_key, http_client=httpx.Client(proxy=proxy_url))

    return OpenAI(api_key=api_key)

"""Utility functions."""

from flowlingo.utils.response import (conflict, error_response, forbidden,
                                      not_found, rate_limited, server_error,
                                      service_unavailable, success_response,
                                      unauthorized, validation_error)

__all__ = [
    "success_response",
    "error_response",
    "unauthorized",
    "forbidden",
    "not_found",
    "validation_error",
    "conflict",
    "rate_limited",
    "server_error",
    "service_unavailable",
]

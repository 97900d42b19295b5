"""Structured logging configuration for production."""

import logging
import sys
import time

import requests
import structlog
from pythonjsonlogger import jsonlogger

# Redis keys for error tracking
ERROR_COUNT_KEY = "flowlingo:errors:5xx:count"
ERROR_ALERT_SENT_KEY = "flowlingo:errors:5xx:alert_sent"

logger = logging.getLogger(__name__)


def send_admin_alert(app, error_count: int, sample_errors: list):
    """Post a high error rate alert to the configured webhook."""
    webhook_url = app.config.get("ALERT_WEBHOOK_URL", "")
    if not webhook_url:
        return

    message = f"FlowLingo backend: {error_count} 5xx errors in the last window."
    if sample_errors:
        message += "\n" + "\n".join(f"- {err}" for err in sample_errors[:3])

    try:
        requests.post(webhook_url, json={"text": message}, timeout=5)
    except requests.RequestException as e:
        logger.warning(f"Failed to send error alert: {e}")


def track_5xx_error(app, path: str, status_code: int):
    """Track 5xx errors in Redis and alert if threshold exceeded."""
    from flowlingo.extensions import get_redis_client

    try:
        redis = get_redis_client()
        window = app.config.get("ERROR_ALERT_WINDOW", 300)
        threshold = app.config.get("ERROR_ALERT_THRESHOLD", 10)
        cooldown = app.config.get("ERROR_ALERT_COOLDOWN", 600)

        error_key = f"{ERROR_COUNT_KEY}:{int(time.time() // window)}"
        error_info = f"{status_code} {path}"

        pipe = redis.pipeline()
        pipe.rpush(error_key, error_info)
        pipe.expire(error_key, window * 2)
        pipe.llen(error_key)
        results = pipe.execute()

        error_count = results[2]

        if error_count >= threshold and not redis.get(ERROR_ALERT_SENT_KEY):
            sample_errors = redis.lrange(error_key, 0, 4)
            send_admin_alert(app, error_count, sample_errors)
            redis.setex(ERROR_ALERT_SENT_KEY, cooldown, "1")

    except Exception as e:
        # Tracking must never break the response
        logger.warning(f"Failed to track 5xx error: {e}")


def setup_logging(app):
    """Configure structured JSON logging for production."""
    log_level = logging.DEBUG if app.debug else logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.processors.JSONRenderer()
                if not app.debug
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if not app.debug:
        json_formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )

        app.logger.handlers = []

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(json_formatter)
        handler.setLevel(log_level)

        app.logger.addHandler(handler)
        app.logger.setLevel(log_level)

        # Route our package loggers and noisy libraries through the same handler
        for logger_name, level in (
            ("flowlingo", log_level),
            ("werkzeug", logging.WARNING),
            ("sqlalchemy.engine", logging.WARNING),
        ):
            lib_logger = logging.getLogger(logger_name)
            lib_logger.handlers = []
            lib_logger.addHandler(handler)
            lib_logger.setLevel(level)

    @app.before_request
    def log_request_info():
        import uuid

        from flask import g, request

        g.request_id = str(uuid.uuid4())[:8]
        g.request_start_time = time.time()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=g.request_id,
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
        )

    @app.after_request
    def log_response_info(response):
        from flask import g, request

        if hasattr(g, "request_start_time"):
            duration_ms = (time.time() - g.request_start_time) * 1000

            if request.path != "/health" and not app.testing:
                structlog.get_logger().info(
                    "request_completed",
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 2),
                    content_length=response.content_length,
                )

            if response.status_code >= 500 and not app.testing:
                track_5xx_error(app, request.path, response.status_code)

        return response

    return app

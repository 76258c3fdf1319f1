"""
Structured request logging: path, method, client_ip, status_code, latency_ms, request_id.
"""
import json
import logging
import time

from users_backend.core.settings import get_settings

REQUEST_LOGGER_NAME = "users_backend.requests"


def configure_logging() -> None:
    """Apply LOG_LEVEL to the root logger and give it a stderr handler if it has none."""
    level = getattr(logging, get_settings().log_level, logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)


def setup_request_logger() -> logging.Logger:
    """Configure and return a logger for request logs."""
    log_path = get_settings().log_path
    logger = logging.getLogger(REQUEST_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    if not logger.handlers:
        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_path, encoding="utf-8")
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


def log_request(request, status_code: int, latency_ms: float) -> None:
    """Emit one structured JSON log line. Never raises."""
    try:
        state = getattr(request, "state", None)
        request_id = getattr(state, "request_id", None) if state else None
        client_ip = request.client.host if request.client else ""
        payload = {
            "path": request.url.path,
            "method": request.method,
            "client_ip": client_ip,
            "status_code": status_code,
            "latency_ms": round(latency_ms, 2),
            "timestamp": time.time(),
        }
        if request_id:
            payload["request_id"] = request_id
        setup_request_logger().info(json.dumps(payload))
    except Exception:
        logging.getLogger(__name__).debug("Request log write failed", exc_info=True)

"""Health checks: liveness (process up) and readiness (dependencies reachable)."""
from typing import Any, Dict, Optional

from users_backend.db import MySQLConnection


def check_live() -> Dict[str, Any]:
    """Liveness: app process is running."""
    return {"status": "ok", "check": "live"}


async def check_ready(connection: Optional[MySQLConnection]) -> Dict[str, Any]:
    """Readiness: DB is reachable."""
    db_ok = connection is not None and await connection.ping()
    return {
        "status": "ok" if db_ok else "degraded",
        "check": "ready",
        "database": "up" if db_ok else "down",
    }

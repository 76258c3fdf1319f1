"""
Server startup script.
Run from project root: python run.py

Binds to 0.0.0.0 on PORT (default 3000).
"""
import uvicorn

from users_backend.core.settings import get_settings

if __name__ == "__main__":
    uvicorn.run(
        "users_backend.main:app",
        host="0.0.0.0",
        port=get_settings().port,
    )

# cleanup_sessions.py
from app import model  # noqa: F401
from app.database import get_ctx_db
from app.router.auth_util import cleanup_expired_sessions


if __name__ == "__main__":
    with get_ctx_db() as db:
        removed = cleanup_expired_sessions(db)
    print(f"🧹 Removed {removed} expired session(s).")

from app.database.db import get_db, get_ctx_db, transaction

__all__ = ["get_db", "get_ctx_db", "transaction"]

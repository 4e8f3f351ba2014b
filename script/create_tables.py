# create_tables.py
from sqlalchemy import inspect

from app import model  # noqa: F401  registers every table on Base.metadata
from app.database.base_class import Base
from app.database.db import ENGINE


Base.metadata.create_all(bind=ENGINE)
print("✅ Tables created.")

inspector = inspect(ENGINE)
print("📋 Existing tables:", inspector.get_table_names())

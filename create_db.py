# create_db.py - Create database tables
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent / "backend"
sys.path.insert(0, str(backend_dir))

from sqlalchemy import inspect

from studio.db.base import Base
from studio.db.session import engine
from studio import models  # noqa: F401  registers every table on Base.metadata

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("Database tables created.")

tables = inspect(engine).get_table_names()
print(f"\n{len(tables)} tables:")
for table in tables:
    print(f"   - {table}")

"""
Database initialization script.
"""
from narumate.db.session import init_db

if __name__ == "__main__":
    print("Initializing database...")
    if init_db():
        print("Database initialized successfully!")
    else:
        print("DATABASE_URL / DATABASE_ACCESS_KEY not set, nothing to initialize (local mode).")

# core/setup_db.py

from core.database import engine, init_db
from services.seed_service import ensure_default_data
from services.storage_service import StorageGateway


def main():
    print("Creating database tables...")

    # Create all SQLAlchemy tables
    init_db(engine)

    # Insert demo users, patients and appointments
    seeded = ensure_default_data(StorageGateway())
    if seeded:
        print("Seeded: " + ", ".join(c.value for c in seeded))

    print("Database initialized successfully.")


if __name__ == "__main__":
    main()

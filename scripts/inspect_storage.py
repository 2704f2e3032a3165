"""Print what the local store currently holds.

Usage: python -m scripts.inspect_storage
"""
from core.config import DATABASE_URL
from core.database import engine, init_db
from services.storage_service import SESSION_KEY, Collection, StorageGateway


def main():
    print("Database:", DATABASE_URL)
    init_db(engine)
    gateway = StorageGateway()
    for collection in Collection:
        key = gateway.key_for(collection.value)
        if not gateway.has_item(key):
            print(f"{key}: <absent>")
            continue
        print(f"{key}: {len(gateway.load(collection))} record(s)")
    sessions = gateway.keys(startswith=f"{SESSION_KEY}_")
    print(f"Sessions: {len(sessions)}")
    for key in sessions:
        print(" ", key)


if __name__ == "__main__":
    main()

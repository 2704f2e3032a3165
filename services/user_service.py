from models import User
from services.storage_service import StorageGateway


def authenticate_user(gateway: StorageGateway, email: str, password: str) -> User | None:
    """Return the user whose email and password both match exactly.

    Passwords are stored and compared as plaintext. The caller only learns
    whether a match exists, never which field was wrong.
    """
    return next(
        (u for u in gateway.load_users() if u.email == email and u.password == password),
        None,
    )


def get_user_for_patient(gateway: StorageGateway, patient_id: str) -> User | None:
    return next((u for u in gateway.load_users() if u.patient_id == patient_id), None)

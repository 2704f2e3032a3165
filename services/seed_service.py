import logging

from services.storage_service import Collection, StorageGateway

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    {
        "id": "1",
        "role": "Admin",
        "email": "admin@entnt.in",
        "password": "admin123",
        "name": "David Lee",
    },
    {
        "id": "2",
        "role": "Patient",
        "email": "john@entnt.in",
        "password": "patient123",
        "patientId": "p1",
        "name": "John Doe",
    },
    {
        "id": "3",
        "role": "Patient",
        "email": "emily@entnt.in",
        "password": "patient789",
        "patientId": "p2",
        "name": "Emily Johnson",
    },
]

DEFAULT_PATIENTS = [
    {
        "id": "p1",
        "name": "John Doe",
        "dob": "1990-05-10",
        "contact": "1234567890",
        "email": "john@entnt.in",
        "address": "123 Main St, City, State 12345",
        "emergencyContact": "0987654321",
        "healthInfo": "No allergies",
        "allergies": "None",
        "medications": "None",
        "createdAt": "2025-04-10T11:00:00Z",
    },
    {
        "id": "p2",
        "name": "Emily Johnson",
        "dob": "1992-11-05",
        "contact": "8765432109",
        "email": "emily@entnt.in",
        "address": "321 Maple St, Townsville, State 54321",
        "emergencyContact": "1122334455",
        "healthInfo": "Asthma, uses inhaler occasionally",
        "allergies": "Dust, pollen",
        "medications": "Albuterol inhaler as needed",
        "createdAt": "2025-03-22T16:45:00Z",
    },
]

DEFAULT_INCIDENTS = [
    {
        "id": "i1",
        "patientId": "p1",
        "title": "Toothache",
        "description": "Upper molar pain",
        "comments": "Sensitive to cold",
        "appointmentDate": "2025-07-01T10:00:00",
        "cost": 80,
        "treatment": "Tooth extraction, pain management",
        "status": "Completed",
        "files": [],
        "createdAt": "2025-06-01T14:20:00Z",
        "updatedAt": "2025-06-10T16:00:00Z",
    },
    {
        "id": "i2",
        "patientId": "p1",
        "title": "Routine Dental Checkup",
        "description": "Annual dental examination and cleaning",
        "comments": "Patient advised regular flossing",
        "appointmentDate": "2025-08-10T10:30:00Z",
        "status": "Scheduled",
        "files": [],
        "createdAt": "2025-01-15T11:00:00Z",
        "updatedAt": "2025-08-10T12:00:00Z",
    },
    {
        "id": "i3",
        "patientId": "p2",
        "title": "Cavity Treatment - Molar",
        "description": "Treated cavity on upper right molar with composite filling",
        "comments": "Next check-up in 3 months",
        "appointmentDate": "2025-02-01T09:00:00Z",
        "status": "Scheduled",
        "files": [],
        "createdAt": "2025-01-20T15:30:00Z",
        "updatedAt": "2025-02-01T10:15:00Z",
    },
]

_DEFAULTS = {
    Collection.USERS: DEFAULT_USERS,
    Collection.PATIENTS: DEFAULT_PATIENTS,
    Collection.INCIDENTS: DEFAULT_INCIDENTS,
}


def ensure_default_data(gateway: StorageGateway) -> list[Collection]:
    """
    Seeds demo users, patients and incidents on a fresh store.

    A collection is only seeded when its key has never been written; an
    existing (even empty) collection is left alone. Returns what was seeded.
    """
    seeded = []
    for collection, records in _DEFAULTS.items():
        if gateway.has_item(gateway.key_for(collection.value)):
            continue
        if gateway.save(collection, records):
            seeded.append(collection)
            logger.info("seeded default %s (%d records)", collection.value, len(records))
    return seeded

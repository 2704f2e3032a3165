import os

from dotenv import load_dotenv

load_dotenv()

# Path: project_root/data/clinic.db
BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.path.join(BASE_DIR, "data")

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(DATA_DIR, 'clinic.db')}")

# Naive timestamps and "same day" checks are evaluated in this zone
CLINIC_TIMEZONE = os.getenv("CLINIC_TIMEZONE", "UTC")

STORAGE_KEY_PREFIX = os.getenv("STORAGE_KEY_PREFIX", "dental_center_")

MAX_ATTACHMENTS = int(os.getenv("MAX_ATTACHMENTS", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

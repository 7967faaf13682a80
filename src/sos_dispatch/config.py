import os
from pathlib import Path


LOG_LEVEL = os.getenv("SOS_LOG_LEVEL", "INFO").upper()
ROSTER_PATH = Path(os.environ["SOS_ROSTER_PATH"]) if os.getenv("SOS_ROSTER_PATH") else None
SEED_RESPONDERS = int(os.getenv("SOS_SEED_RESPONDERS", "5"))
SEED = int(os.getenv("SOS_SEED", "7"))
CENTER_LAT = float(os.getenv("SOS_CENTER_LAT", "19.0760"))
CENTER_LNG = float(os.getenv("SOS_CENTER_LNG", "72.8777"))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("SOS_CORS_ORIGINS", "*").split(",") if origin.strip()]
SUMMARY_LIMIT = int(os.getenv("SOS_SUMMARY_LIMIT", "100"))

EARTH_RADIUS_KM = 6371.0
DEFAULT_CITIZEN_NAME = "Anonymous"
DEFAULT_DECLARED_SEVERITY = 3
MIN_SEVERITY = 1
MAX_SEVERITY = 5

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_GEOFENCE_RADIUS_METERS = 50
DEFAULT_EARLY_ADMISSION_MINUTES = 15
DEFAULT_LATE_THRESHOLD_MINUTES = 10

DEFAULT_UPSERT_MAX_RETRIES = 3
DEFAULT_BATCH_MAX_WORKERS = 1
DEFAULT_HISTORY_LIMIT = 30

GEOFENCE_FAILED_NOTE = "Location verification failed. Distance from class: {distance}m"

DEFAULT_NEARBY_MAX_DISTANCE_METERS = 100
UPCOMING_CLASS_WINDOW_MINUTES = 30

PERMISSION_APPROVED_NOTE = "Permission #{request_id} approved ({kind}): {reason}"
MAX_PERMISSION_REASON_LENGTH = 500
DEFAULT_PERMISSION_LIST_LIMIT = 200

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

OTP_TTL_MINUTES = 10
OTP_MIN = 100000
OTP_MAX = 999999

DEFAULT_TOKEN_TTL_SECONDS = 3600
MIN_PASSWORD_LENGTH = 6

FACE_MATCH_THRESHOLD = 0.6
REDUCED_CONFIDENCE = 0.5

PROFILE_PHOTO_FOLDER = "profile-photos"
ATTENDANCE_PHOTO_FOLDER = "attendance-photos"

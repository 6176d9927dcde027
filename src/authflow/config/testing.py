from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret-0123456789abcdef"
JWT_EXPIRES_IN = "1h"
MAIL_BACKEND = "log"
STORAGE_BACKEND = "local"
GOOGLE_CLOUD_VISION_API_KEY = ""

DEBUG = False
TESTING = True
AUTO_INIT_DB = False

"""
Django settings for Freightplan tests.
"""

SECRET_KEY = "test-secret-key-for-freightplan-tests"

DEBUG = True

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "simple_history",
    "rest_framework",
    "freightplan",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

ROOT_URLCONF = "freightplan.tests.test_api_urls"

USE_TZ = True
TIME_ZONE = "Asia/Riyadh"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
}

FREIGHTPLAN = {
    "BULK_BATCH_SIZE": 2,
}

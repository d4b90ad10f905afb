"""
Django settings for bakeryshop project.
Django 5.x
Render-ready deployment + local development (DRF + SimpleJWT cookie auth + Jazzmin).
"""

from datetime import timedelta
from pathlib import Path
import os
from corsheaders.defaults import default_headers
from dotenv import load_dotenv

# --------------------------------------------------
# Load .env file (optional locally, absent on Render)
# --------------------------------------------------
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# --------------------------------------------------
# Core settings
# --------------------------------------------------
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "django-insecure-dev-key"
)

DEBUG = os.environ.get("DEBUG", "0") == "1"

ALLOWED_HOSTS = [
    h.strip()
    for h in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1,0.0.0.0,testserver").split(",")
    if h.strip()
]

CSRF_TRUSTED_ORIGINS = [
    o.strip()
    for o in os.environ.get("CSRF_TRUSTED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

# --------------------------------------------------
# Applications
# --------------------------------------------------
INSTALLED_APPS = [
    "jazzmin",
    "bakery",

    # Cloudinary (product images)
    "cloudinary",

    # Third party
    "corsheaders",
    "rest_framework",
    "rest_framework_simplejwt",
    "django_extensions",

    # Django default
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

# --------------------------------------------------
# DRF settings (JWT in HttpOnly cookie)
# --------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "bakery.authentication.CookieJWTAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "EXCEPTION_HANDLER": "bakery.exceptions.api_exception_handler",
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=int(os.environ.get("JWT_ACCESS_MINUTES", "480"))),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=int(os.environ.get("JWT_REFRESH_DAYS", "7"))),
    "SIGNING_KEY": os.environ.get("JWT_SECRET", SECRET_KEY),
    "AUTH_HEADER_TYPES": ("Bearer",),
    "USER_ID_CLAIM": "user_id",
}

AUTH_COOKIE_NAME = os.environ.get("AUTH_COOKIE_NAME", "auth-token")
AUTH_COOKIE_SECURE = os.environ.get("AUTH_COOKIE_SECURE", "0" if DEBUG else "1") == "1"
AUTH_COOKIE_SAMESITE = os.environ.get("AUTH_COOKIE_SAMESITE", "Lax")

# --------------------------------------------------
# Middleware
# --------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",

    # CORS must be placed before CommonMiddleware
    "corsheaders.middleware.CorsMiddleware",

    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "bakeryshop.urls"
WSGI_APPLICATION = "bakeryshop.wsgi.application"
AUTH_USER_MODEL = "bakery.User"

# --------------------------------------------------
# CORS configuration
# --------------------------------------------------
CORS_ALLOW_ALL_ORIGINS = False

CORS_ALLOWED_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]

CORS_ALLOW_METHODS = ["DELETE", "GET", "OPTIONS", "PATCH", "POST", "PUT"]
CORS_ALLOW_HEADERS = list(default_headers) + ["authorization"]
# cookie auth needs credentials
CORS_ALLOW_CREDENTIALS = True

# --------------------------------------------------
# Database
# Auto-switch:
# - Local: SQLite
# - Render: PostgreSQL via DATABASE_URL
# --------------------------------------------------
DATABASE_URL = os.environ.get("DATABASE_URL", "").strip()

if DATABASE_URL:
    import dj_database_url
    DATABASES = {
        "default": dj_database_url.parse(
            DATABASE_URL,
            conn_max_age=600,
            ssl_require=not DEBUG,
        )
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

# --------------------------------------------------
# Templates (admin only)
# --------------------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# --------------------------------------------------
# Internationalization
# Attendance "days" are local calendar days in TIME_ZONE
# --------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "America/Bogota")
USE_I18N = True
USE_TZ = True

# --------------------------------------------------
# Static files
# --------------------------------------------------
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

# --------------------------------------------------
# Media (Cloudinary product images)
# CLOUDINARY_URL is read by the cloudinary SDK itself
# --------------------------------------------------
CLOUDINARY_URL = os.environ.get("CLOUDINARY_URL", "").strip()

CLOUD_NAME = os.environ.get("CLOUDINARY_CLOUD_NAME", "").strip()
API_KEY = os.environ.get("CLOUDINARY_API_KEY", "").strip()
API_SECRET = os.environ.get("CLOUDINARY_API_SECRET", "").strip()

if not CLOUDINARY_URL and CLOUD_NAME and API_KEY and API_SECRET:
    CLOUDINARY_URL = f"cloudinary://{API_KEY}:{API_SECRET}@{CLOUD_NAME}"
    os.environ["CLOUDINARY_URL"] = CLOUDINARY_URL

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# --------------------------------------------------
# Bakery business rules
# --------------------------------------------------
BAKERY_WORKDAY_START = os.environ.get("BAKERY_WORKDAY_START", "08:00")
BAKERY_MEAL_BREAK_MINUTES = int(os.environ.get("BAKERY_MEAL_BREAK_MINUTES", "60"))
BAKERY_SHORT_BREAK_MINUTES = int(os.environ.get("BAKERY_SHORT_BREAK_MINUTES", "15"))
BAKERY_MEAL_WARNING_MINUTES = int(os.environ.get("BAKERY_MEAL_WARNING_MINUTES", "50"))
# admin alerts board
BAKERY_LATE_ALERT_MINUTES = int(os.environ.get("BAKERY_LATE_ALERT_MINUTES", "15"))
BAKERY_LATE_ERROR_MINUTES = int(os.environ.get("BAKERY_LATE_ERROR_MINUTES", "30"))
BAKERY_NO_CHECKIN_ALERT_HOUR = int(os.environ.get("BAKERY_NO_CHECKIN_ALERT_HOUR", "9"))
BAKERY_NO_CHECKIN_ERROR_HOUR = int(os.environ.get("BAKERY_NO_CHECKIN_ERROR_HOUR", "10"))
BAKERY_RECENT_TRANSACTIONS = int(os.environ.get("BAKERY_RECENT_TRANSACTIONS", "10"))

# --------------------------------------------------
# Logging
# LOG_FORMAT=json switches the console to structured output
# --------------------------------------------------
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("LOG_FORMAT", "simple").lower()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{levelname} {asctime} {name} {message}",
            "style": "{",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if LOG_FORMAT == "json" else "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "WARNING"),
            "propagate": False,
        },
        "bakery": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

# --------------------------------------------------
# Jazzmin configuration
# --------------------------------------------------
JAZZMIN_SETTINGS = {
    "site_title": "Bakery Admin",
    "site_header": "Bakery Back Office",
    "welcome_sign": "Welcome to the Bakery back office",
    "site_brand": "Bakery POS",
    "show_sidebar": True,
    "navigation_expanded": True,
    "icons": {
        "bakery.User": "fas fa-user-shield",
        "bakery.Category": "fas fa-boxes",
        "bakery.Product": "fas fa-bread-slice",
        "bakery.Sale": "fas fa-shopping-cart",
        "bakery.Expense": "fas fa-coins",
        "bakery.CakeBarOption": "fas fa-sliders-h",
        "bakery.CakeBarOrder": "fas fa-birthday-cake",
        "bakery.CustomOrder": "fas fa-clipboard-list",
        "bakery.WorkSession": "fas fa-user-clock",
        "bakery.CashRegister": "fas fa-cash-register",
        "bakery.SystemConfig": "fas fa-cogs",
    },
    "order_with_respect_to": [
        "bakery.Product", "bakery.Category", "bakery.Sale", "bakery.Expense",
        "bakery.CakeBarOrder", "bakery.CakeBarOption", "bakery.CustomOrder",
        "bakery.CashRegister", "bakery.WorkSession", "bakery.SystemConfig",
        "bakery.User",
    ],
    "hide_apps": ["auth"],
    "hide_models": ["auth.Group"],
    "show_ui_builder": False,
    "topmenu_links": [
        {"name": "Dashboard", "url": "/admin", "permissions": ["bakery.view_user"]},
        {"model": "bakery.User"},
    ],
}

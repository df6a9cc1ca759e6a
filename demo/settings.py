"""Settings for running the demo app and the test suite."""

SECRET_KEY = "django-tenancy-demo"
DEBUG = True
ALLOWED_HOSTS = ["*"]
USE_TZ = True

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "django_tenancy",
    "demo",
]

MIDDLEWARE = [
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django_tenancy.middleware.TenantImpersonationMiddleware",
    "django_tenancy.middleware.RequireTenantMiddleware",
    "django_tenancy.middleware.TenantSessionScopeMiddleware",
]

ROOT_URLCONF = "demo.urls"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Tables come straight from the models
MIGRATION_MODULES = {"django_tenancy": None, "demo": None}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "tenancy-default",
    },
    "lookups": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "tenancy-lookups",
    },
}

SESSION_ENGINE = "django.contrib.sessions.backends.cache"

TENANCY_CONFIG = {
    "TENANT_MODEL": "demo.Hospital",
    "LANDLORD_MODEL": "demo.Network",
    "RESOLVER": {
        "CLASS": "django_tenancy.resolvers.DomainTenantResolver",
        "CENTRAL_DOMAINS": ["central.example.test"],
    },
    "LANDLORD": {
        "RESOLVER": {"CLASS": "django_tenancy.resolvers.HeaderLandlordResolver"},
    },
}

CELERY_TASK_ALWAYS_EAGER = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"console": {"class": "logging.StreamHandler"}},
    "loggers": {
        "django_tenancy": {"handlers": ["console"], "level": "WARNING"},
    },
}

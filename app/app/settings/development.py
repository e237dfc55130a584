# app/settings/development.py
from .base import *

# Database for development
if not RUNNING_TESTS:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'HOST': os.environ.get('DB_HOST', 'db'),
            'NAME': os.environ.get('DB_NAME', 'timeplus'),
            'USER': os.environ.get('DB_USER', 'timeplus'),
            'PASSWORD': os.environ.get('DB_PASSWORD', 'timeplus'),
            'PORT': os.environ.get('DB_PORT', '5432'),
        }
    }


# Development-specific settings
CORS_ALLOW_ALL_ORIGINS = True  # Be careful with this in production

DEBUG = os.getenv("DEBUG", "False") == "True"
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'payments': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# app/settings/base.py
from pathlib import Path
import os
import sys
from dotenv import load_dotenv
from decimal import Decimal

# Load environment variables
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

RUNNING_TESTS = 'test' in sys.argv or 'pytest' in sys.modules

# Security
SECRET_KEY = os.environ.get('SECRET_KEY')
if not SECRET_KEY:
    # Only allow empty SECRET_KEY in development/testing
    if RUNNING_TESTS:
        SECRET_KEY = 'django-insecure-fallback-for-testing'
    elif os.environ.get('DJANGO_SETTINGS_MODULE', '').endswith('development'):
        SECRET_KEY = 'django-insecure-fallback-for-development'
    else:
        raise ValueError("SECRET_KEY environment variable is required")

DEBUG = False  # Always False in base, override in development

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'rest_framework.authtoken',
    'drf_spectacular',
    'django_extensions',
    'corsheaders',
    # Local apps
    'users',
    'psychologists',
    'appointments',
    'payments',
    'finance',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'app.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'app.wsgi.application'

# Database - Base configuration (override in environment-specific files)
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'HOST': os.environ.get('DB_HOST'),
        'NAME': os.environ.get('DB_NAME'),
        'USER': os.environ.get('DB_USER'),
        'PASSWORD': os.environ.get('DB_PASSWORD'),
        'PORT': os.environ.get('DB_PORT', '5432'),
    }
}

# Tests run against SQLite so they need no database server
if RUNNING_TESTS:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'test_db.sqlite3',
        }
    }

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {'min_length': 6},
    },
]

# Internationalization
LANGUAGE_CODE = 'pt-br'
TIME_ZONE = 'America/Sao_Paulo'
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Media files
MEDIA_URL = '/media/'
MEDIA_ROOT = BASE_DIR / 'media'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Django REST Framework
REST_FRAMEWORK = {
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.TokenAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 20
}

# DRF Spectacular
SPECTACULAR_SETTINGS = {
    'TITLE': 'TimePlus API',
    'DESCRIPTION': 'Online therapy marketplace connecting patients and psychologists',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
    'COMPONENT_SPLIT_REQUEST': True,
}

# Custom User Model
AUTH_USER_MODEL = 'users.User'

# Application-specific settings
FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://127.0.0.1:3000')

# Security defaults (will be overridden in production)
ALLOWED_HOSTS = []
CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOW_CREDENTIALS = True
CSRF_TRUSTED_ORIGINS = []


# =============================================================================
# PAYMENT CONFIGURATION
# =============================================================================

# Payment Providers
PAYMENT_PROVIDERS = {
    'MERCADOPAGO': {
        'ENABLED': os.environ.get('MERCADO_PAGO_ENABLED', 'True') == 'True',
        'ACCESS_TOKEN': os.environ.get('MERCADO_PAGO_ACCESS_TOKEN', ''),
        'PUBLIC_KEY': os.environ.get('MERCADO_PAGO_PUBLIC_KEY', ''),
        'WEBHOOK_ENDPOINT': '/api/mp-webhook',
    },
}

# Publicly reachable base URL the gateway posts notifications to
PAYMENT_NOTIFICATION_BASE_URL = os.environ.get('PAYMENT_NOTIFICATION_BASE_URL', '')

# Payment Configuration
PAYMENT_SETTINGS = {
    'DEFAULT_PROVIDER': 'mercadopago',
    'DEFAULT_CURRENCY': 'BRL',
    'SUPPORTED_CURRENCIES': ['BRL'],
    'GATEWAY_MAX_RETRIES': int(os.environ.get('PAYMENT_GATEWAY_MAX_RETRIES', '3')),
    'GATEWAY_RETRY_DELAY_SECONDS': float(os.environ.get('PAYMENT_GATEWAY_RETRY_DELAY_SECONDS', '0.5')),
}

# =============================================================================
# MARKETPLACE CONFIGURATION
# =============================================================================

# Share of every session rate kept by the platform
PLATFORM_COMMISSION_RATE = Decimal(os.environ.get('PLATFORM_COMMISSION_RATE', '0.15'))

# Sessions are booked on a one-hour grid
SESSION_DURATION_MINUTES = 60

# A session still counts as upcoming until this many minutes after its start
SESSION_GRACE_MINUTES = 59

# Defaults applied to newly registered psychologists
PSYCHOLOGIST_DEFAULT_PROFILE = {
    'TITLE': 'Psicólogo(a) Clínico(a)',
    'BIOGRAPHY': 'Biografia a ser preenchida.',
    'SPECIALTIES': ['TCC', 'Ansiedade'],
    'HOURLY_RATE': Decimal('150.00'),
}

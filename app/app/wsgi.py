"""
WSGI entry point for the TimePlus API.

Web servers run with production settings unless DJANGO_SETTINGS_MODULE
says otherwise.
"""
# app/wsgi.py
import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'app.settings.production')

application = get_wsgi_application()

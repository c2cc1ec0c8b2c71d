"""
WSGI config for RentalMarket project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "RentalMarket.settings")

application = get_wsgi_application()

"""
WSGI config for marriage_registry project.
"""

import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'marriage_registry.settings')
application = get_wsgi_application()

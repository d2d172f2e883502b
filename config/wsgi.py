"""
WSGI config for the User Operation Service.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os
import sys
from pathlib import Path

from django.core.wsgi import get_wsgi_application

# This allows easy placement of apps within the interior user_operation_service directory.
app_path = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(app_path / "user_operation_service"))
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

application = get_wsgi_application()

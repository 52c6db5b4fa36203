# reboot/handlers/__init__.py
# main.py includes only start.router; importing the modules below attaches
# their handlers to that shared router.

from . import start  # creates router
from . import logs   # /log flow, /logs list and deletion
from . import stats  # /stats, /export, alert dismissal

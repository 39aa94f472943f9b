# app/domain/__init__.py
"""
Pure booking rules: availability, appointment lifecycle and domain events.
Nothing in here touches the database.
"""

from .availability import *
from .appointment_lifecycle import *
from .events import *
from .event_dispatcher import *

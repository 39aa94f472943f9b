# app/services/v1/__init__.py
from .user_service import *
from .doctor_service import *
from .appointment_service import *
from .medical_record_service import *
from .chat_service import *

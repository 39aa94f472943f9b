# app/db/schemas/__init__.py
from .schedule_schemas import *
from .user_schemas import *
from .doctor_schema import *
from .appointment_schemas import *
from .medical_record_schemas import *
from .chat_schemas import *

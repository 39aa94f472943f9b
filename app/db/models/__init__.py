# app/db/models/__init__.py
from .db_base_model import *
from .medical_specialty import *
from .user_table import *
from .schedules import *
from .doctor_table import *
from .appointment_table import *
from .medical_record_table import *
from .chat_message_table import *

# app/api/v1/__init__.py
from .system_router import *
from .user_router import *
from .doctor_router import *
from .appointment_router import *
from .medical_record_router import *
from .chat_router import *

routers = [
    system_router,
    user_router,
    doctor_router,
    appointment_router,
    medical_record_router,
    chat_router,
]

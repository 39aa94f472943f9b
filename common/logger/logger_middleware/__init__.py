# common/logger/logger_middleware/__init__.py
from .request_timer import RequestTimer
from .logger_middleware import *

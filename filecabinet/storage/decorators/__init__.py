from .base import ServiceDecorator
from .cache import CachingService
from .logger import LoggingService
from .meter import MeteringService, MethodTiming, print_timing

__all__ = [
    'ServiceDecorator',
    'CachingService',
    'LoggingService',
    'MeteringService',
    'MethodTiming',
    'print_timing',
]

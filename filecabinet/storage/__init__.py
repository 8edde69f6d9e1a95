"""
Storage engines for personnel records.

Two engines implement the FileCabinetService contract: MemoryService keeps
records in a list, FilesystemService keeps them in a flat binary file of
fixed-width slots. The decorators package wraps either one with caching,
logging or timing.
"""

from .codec import RecordCodec
from .interfaces import FileCabinetService
from .guard import RecordGuard
from .filesystem_service import FilesystemService, FileRecords, RecordSlot
from .memory_service import MemoryService
from .decorators import CachingService, LoggingService, MeteringService, ServiceDecorator

__all__ = ['RecordCodec', 'FileCabinetService', 'RecordGuard',
           'FilesystemService', 'FileRecords', 'RecordSlot', 'MemoryService',
           'ServiceDecorator', 'CachingService', 'LoggingService', 'MeteringService']

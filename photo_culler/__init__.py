# Photo Culler
# A Python tool to pair JPEG and RAW files and cull them in batches

from .models import (
    PhotoFileInfo, ExifData, PhotoGroup, GroupStatus, ExportMode, ExportOperation, BatchResult
)
from .exceptions import (
    ProcessingError, ValidationError, FileOperationError, ExifReadError,
    BatchOperationError, NothingExportedError
)
from .path_validator import PathValidator
from .file_scanner import FileScanner
from .exif_reader import ExifReader
from .grouper import PhotoGrouper
from .file_operator import FileOperator
from .logger import ProgressLogger, LogConfig, create_default_logger, get_default_log_file
from .cull_manager import CullManager

__version__ = '1.0.0'

__all__ = [
    'PhotoFileInfo',
    'ExifData',
    'PhotoGroup',
    'GroupStatus',
    'ExportMode',
    'ExportOperation',
    'BatchResult',
    'ProcessingError',
    'ValidationError',
    'FileOperationError',
    'ExifReadError',
    'BatchOperationError',
    'NothingExportedError',
    'PathValidator',
    'FileScanner',
    'ExifReader',
    'PhotoGrouper',
    'FileOperator',
    'ProgressLogger',
    'LogConfig',
    'create_default_logger',
    'get_default_log_file',
    'CullManager'
]

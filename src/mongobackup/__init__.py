"""
mongobackup - scheduled MongoDB dump and Google Cloud Storage archive job
"""

__version__ = "0.1.0"

from .core import BackupOrchestrator
from .errors import BackupError
from .models import BackupParameters

__all__ = ["BackupOrchestrator", "BackupError", "BackupParameters"]

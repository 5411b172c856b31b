"""Metadata acquisition pipeline package."""
from .acquisition import MetadataManager
from .download import MetadataDownloader
from .local_testing import run_local_pipeline

__all__ = ['MetadataManager', 'MetadataDownloader', 'run_local_pipeline']

"""
Transient storage for form photo uploads.
"""

from propertysite.uploads.store import UploadStore, UploadedFile

__all__ = [
    "UploadStore",
    "UploadedFile",
]

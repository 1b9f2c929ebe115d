"""
Common types shared across modules.

This module provides standardized data types for the document rectification
pipeline, ensuring consistency between the rectification core, the upload
collaborator and the outer workflow.
"""

from src.common.types import ImageBuffer, Point

__all__ = ["ImageBuffer", "Point"]

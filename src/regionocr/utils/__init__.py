# -*- coding: utf-8 -*-
"""
The Utilities Package for RegionOCR.

Small helpers that sit outside the selection and recognition pipeline.
"""

from .clipboard_manager import copy_to_clipboard

__all__ = ["copy_to_clipboard"]

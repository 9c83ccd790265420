"""
RegionOCR Application Package.

This package lets an operator select a region of an image on a scaled
preview and extracts the text inside it with EasyOCR. The selected region
can be saved and reused on later runs without opening a window.
"""

__version__ = "0.1.0"

from .app import main

__all__ = ["main"]

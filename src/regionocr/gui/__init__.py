# -*- coding: utf-8 -*-
"""
The GUI Package for RegionOCR.

Holds the PyQt6 preview window used in interactive mode. It is imported
lazily by the application controller so reuse mode never touches widgets.
"""

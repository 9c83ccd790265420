"""
Initializes the 'src' directory as a Python package.

This lets the root-level 'main.py' launcher import the application as
'src.regionocr' without installing it first.
"""

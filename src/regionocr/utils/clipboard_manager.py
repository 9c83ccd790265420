# -*- coding: utf-8 -*-
"""
src/regionocr/utils/clipboard_manager.py

A small wrapper around 'pyperclip' for placing recognized text on the
system clipboard.
"""

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """
    Copies the given text to the system clipboard.

    Args:
        text (str): The string to be copied.

    Returns:
        bool: True if the text was copied successfully, False otherwise.
    """
    try:
        pyperclip.copy(text)
        logger.info(f"Copied {len(text)} characters to the clipboard.")
        return True
    except pyperclip.PyperclipException as e:
        # No clipboard mechanism available, e.g. xclip/xsel missing on Linux.
        logger.error(f"Failed to copy text to clipboard: {e}")
        logger.warning(
            "Clipboard functionality may not be available on this system. "
            "If on Linux, please ensure 'xclip' or 'xsel' is installed."
        )
        return False

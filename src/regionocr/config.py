# -*- coding: utf-8 -*-
"""
src/regionocr/config.py

Module for handling application configuration.

This module defines default settings for RegionOCR, such as the recognition
languages and the preview margin. It loads user-defined settings from a
configuration file (config.ini), creating one with default values on the
first run.
"""

import configparser
import logging
import platform
from pathlib import Path
from typing import List, Optional

# --- Constants ---
APP_NAME = "RegionOCR"
DEFAULT_CONFIG_FILENAME = "config.ini"

logger = logging.getLogger(__name__)


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    - Windows: %APPDATA%/RegionOCR
    - macOS: ~/Library/Application Support/RegionOCR
    - Linux: ~/.config/RegionOCR

    Returns:
        Path: A Path object to the application's data directory.
    """
    if platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":  # macOS
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:  # Linux and other Unix-like
        app_dir = Path.home() / ".config" / APP_NAME
    return app_dir


class Config:
    """
    Manages application configuration by loading defaults and overriding
    them with settings from a user-specific config file.
    """

    def __init__(self, config_file_path: Optional[Path] = None):
        """
        Initializes the configuration manager.

        Args:
            config_file_path (Path, optional): An explicit config file. When
                omitted, config.ini in the application directory is used and
                created with defaults if missing.
        """
        self.parser = configparser.ConfigParser()
        if config_file_path is None:
            self.config_file_path = get_app_dir() / DEFAULT_CONFIG_FILENAME
            create_missing = True
        else:
            self.config_file_path = Path(config_file_path)
            create_missing = False

        self._load_defaults()
        self._load_from_file(create_missing)

    def _load_defaults(self):
        """Sets the default configuration values in the parser object."""
        self.parser["General"] = {
            "languages": "en",
            "gpu": "False",
        }
        self.parser["Recognition"] = {
            "confidence_threshold": "0.0",
            "min_text_height": "0.01",
            "paragraph": "False",
        }
        self.parser["Preview"] = {
            "margin": "0.9",
        }
        self.parser["Output"] = {
            "copy_to_clipboard": "False",
        }

    def _load_from_file(self, create_missing: bool):
        """
        Loads settings from the config file, overriding defaults.
        A missing default file is created with the default values.
        """
        if self.config_file_path.exists():
            try:
                self.parser.read(self.config_file_path, encoding="utf-8")
                logger.debug(f"Configuration loaded from {self.config_file_path}")
            except configparser.Error as e:
                logger.error(f"Error reading config file {self.config_file_path}: {e}. Using defaults.")
                self._load_defaults()
        elif create_missing:
            self._save_defaults()
        else:
            logger.warning(f"Config file not found at {self.config_file_path}. Using defaults.")

    def _save_defaults(self):
        """Saves the current (default) configuration to the config file."""
        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding="utf-8") as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# You can edit these values. They are read at start-up.\n\n")
                self.parser.write(configfile)
        except OSError as e:
            # Not critical, the defaults are still in memory.
            logger.warning(f"Could not write config file at {self.config_file_path}: {e}")

    # --- Properties to access settings easily and with correct types ---

    @property
    def languages(self) -> List[str]:
        """Language codes handed to the recognition engine."""
        raw = self.parser.get("General", "languages", fallback="en")
        return [code.strip() for code in raw.split(",") if code.strip()] or ["en"]

    @property
    def gpu(self) -> bool:
        """Whether the recognition engine may use the GPU."""
        return self.parser.getboolean("General", "gpu", fallback=False)

    @property
    def confidence_threshold(self) -> float:
        """Minimum confidence (0-1) for a recognized line to be kept."""
        return self.parser.getfloat("Recognition", "confidence_threshold", fallback=0.0)

    @property
    def min_text_height(self) -> float:
        """Minimum text height as a fraction of the analyzed image height."""
        return self.parser.getfloat("Recognition", "min_text_height", fallback=0.01)

    @property
    def paragraph(self) -> bool:
        """Whether nearby lines are merged into paragraphs."""
        return self.parser.getboolean("Recognition", "paragraph", fallback=False)

    @property
    def preview_margin(self) -> float:
        """Fraction of the screen the scaled preview may occupy."""
        return self.parser.getfloat("Preview", "margin", fallback=0.9)

    @property
    def copy_to_clipboard(self) -> bool:
        """Whether recognized text is also copied to the clipboard."""
        return self.parser.getboolean("Output", "copy_to_clipboard", fallback=False)


_config: Optional[Config] = None


def get_config(config_file_path: Optional[Path] = None) -> Config:
    """
    Returns the process-wide configuration, loading it on first use.

    Passing a path replaces the cached instance with one read from that file.
    """
    global _config
    if _config is None or config_file_path is not None:
        _config = Config(config_file_path)
    return _config

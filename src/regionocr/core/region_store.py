# -*- coding: utf-8 -*-
"""
src/regionocr/core/region_store.py

Reads and writes region records.

A region record is a single line holding the four components of a native
rectangle, e.g. "20.00 20.00 200.00 100.00". There is no versioning and no
bounds checking here; the recognition orchestrator validates regions before
it uses them.
"""

import logging
import math
from pathlib import Path
from typing import Union

from ..errors import MalformedRecordError, PersistenceWriteError, RegionNotFoundError, RegionParseError
from .geometry import NativeRect

logger = logging.getLogger(__name__)

# Reuse mode always reads this file from the current working directory.
REUSED_REGION_FILENAME = "region.txt"

PathLike = Union[str, Path]


def serialize(rect: NativeRect) -> str:
    """Formats a native rectangle with two fractional digits per component."""
    return "{:.2f} {:.2f} {:.2f} {:.2f}".format(*rect.as_tuple())


def deserialize(text: str) -> NativeRect:
    """
    Parses a region record.

    Raises:
        MalformedRecordError: Unless the text holds exactly four finite numbers.
    """
    tokens = text.split()
    if len(tokens) != 4:
        raise MalformedRecordError(f"expected 4 values, found {len(tokens)}: {text!r}")

    values = []
    for token in tokens:
        try:
            value = float(token)
        except ValueError:
            raise MalformedRecordError(f"not a number: {token!r}") from None
        if not math.isfinite(value):
            raise MalformedRecordError(f"not a finite number: {token!r}")
        values.append(value)

    return NativeRect(*values)


def save_region(rect: NativeRect, path: PathLike) -> None:
    """Writes a region record, replacing any previous content."""
    path = Path(path)
    try:
        path.write_text(serialize(rect) + "\n", encoding="utf-8")
    except OSError as e:
        raise PersistenceWriteError(f"could not write region to {path}: {e}") from e
    logger.info(f"Region saved to {path}: {serialize(rect)}")


def load_region(path: PathLike) -> NativeRect:
    """
    Reads a region record from disk.

    Raises:
        RegionNotFoundError: If the file does not exist.
        MalformedRecordError: If the content is not a valid record.
        RegionParseError: If the file exists but cannot be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise RegionNotFoundError(f"no saved region at {path}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise RegionParseError(f"could not read region from {path}: {e}") from e

    rect = deserialize(text)
    logger.info(f"Loaded region from {path}: {serialize(rect)}")
    return rect

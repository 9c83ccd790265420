# -*- coding: utf-8 -*-
"""
src/regionocr/errors.py

Exception hierarchy for RegionOCR.

Only ArgumentError, ImageLoadError and RegionParseError (in reuse mode) end
the process. Crop, engine and write failures are logged by the orchestrator
and the run continues with whatever it still has.
"""


class RegionOCRError(Exception):
    """Base class for all RegionOCR errors."""


class ArgumentError(RegionOCRError):
    """The command line could not be parsed."""


class ImageLoadError(RegionOCRError):
    """The input image could not be read or decoded."""


class RegionParseError(RegionOCRError):
    """A persisted region record could not be turned into a rectangle."""


class MalformedRecordError(RegionParseError):
    """The record does not hold exactly four real numbers."""


class RegionNotFoundError(RegionParseError):
    """No region record exists at the expected path."""


class CropError(RegionOCRError):
    """The crop rectangle does not fit inside the image."""


class EngineError(RegionOCRError):
    """The recognition engine reported a failure."""


class PersistenceWriteError(RegionOCRError):
    """An output artifact could not be written."""


class UserCancellation(RegionOCRError):
    """The operator closed the preview before finishing a selection."""

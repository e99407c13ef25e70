from __future__ import annotations


class ListingSheetError(Exception):
    """Base class for every error surfaced to the user as a status message."""


class EmptyInput(ListingSheetError):
    pass


class NoRecordsFound(ListingSheetError):
    pass


class FileReadFailure(ListingSheetError):
    pass


class ImportDecodeFailure(ListingSheetError):
    pass


class ExportFailure(ListingSheetError):
    pass

class PickSortError(Exception):
    """Base error for the project."""


class ScanError(PickSortError):
    pass


class DestinationError(PickSortError):
    """The target folder could not be created. Nothing was transferred."""

    def __init__(self, destination, reason: str):
        super().__init__(f"Cannot prepare target folder {destination}: {reason}")
        self.destination = destination
        self.reason = reason


class CrossDeviceError(OSError):
    """Raised by a filesystem when a rename would cross storage volumes."""


class SourceNotRemovedError(PickSortError):
    """A cross-volume move copied the file but could not delete the original."""

    def __init__(self, copy, reason: str):
        super().__init__(f"copied to {copy}, but the original could not be deleted: {reason}")
        self.copy = copy
        self.reason = reason

# shopcart/errors.py


class CartError(Exception):
    """Base class for cart failures."""


class StorageUnavailableError(CartError):
    """The persistence slot could not be read or written."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"storage unavailable for '{key}': {reason}")


class CartNotLoadedError(CartError):
    """An operation ran before CartStore.load()."""

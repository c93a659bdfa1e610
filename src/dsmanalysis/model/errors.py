"""Exception types raised by the model layer."""


class NotSymmetricError(ValueError):
    """A symmetric-only operation was called on an asymmetric matrix."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"'{operation}' can only be used on a symmetric matrix.")
        self.operation = operation


class MatrixParseError(ValueError):
    """Matrix data handed over by a persistence collaborator is corrupt or incomplete."""

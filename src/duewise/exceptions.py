"""Domain-specific exceptions."""


class DueWiseError(Exception):
    """Base exception for the package."""


class SnapshotError(DueWiseError):
    """A requested change cannot be applied to the financial snapshot."""


class DebtNotFoundError(SnapshotError):
    """No debt with the requested id exists in the snapshot."""

    def __init__(self, debt_id: str):
        super().__init__(f"Debt {debt_id!r} not found")
        self.debt_id = debt_id


class InvalidAmountError(SnapshotError):
    """A monetary or day value failed validation at the input boundary."""

class NotFoundError(Exception):
    """A referenced record does not exist (or is archived)."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found")


class SlotUnavailableError(Exception):
    """The requested time is not offered or overlaps an existing appointment."""

    def __init__(self, staff_id: str, date: str, time: str, message: str = None):
        self.staff_id = staff_id
        self.date = date
        self.time = time
        super().__init__(
            message or "This time slot is not available. Please select a different time."
        )


class InvalidStateError(Exception):
    """The record is in a state that does not allow the operation."""

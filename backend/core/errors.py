class ZeroCodeError(Exception):
    """Base class for errors raised by the Zero Code ML core."""


class CompletionError(ZeroCodeError):
    """The completion service returned no usable content."""


class EmptyDatasetError(ZeroCodeError):
    def __init__(self, message: str = "Please upload data first"):
        super().__init__(message)


class ProcessingError(ZeroCodeError):
    """An error escaped the per-request fallbacks and failed the whole batch."""

    def __init__(self, message: str = "Error processing data. Please try again.",
                 task: str = ""):
        super().__init__(message)
        self.task = task

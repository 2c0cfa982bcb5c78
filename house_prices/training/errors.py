"""Custom exceptions for model training."""


class TrainingError(Exception):
    """
    Raised when training cannot complete.

    This can happen when:
    - The training split is empty
    - The model's fit() raises (the original error is the cause)
    """

    pass


class TrainingCancelledError(TrainingError):
    """
    Raised when training is stopped through its cancel event.

    This can happen when:
    - A UI or signal handler sets the event while epochs are running
    """

    pass

"""Custom exceptions and warnings for data module."""


class DataError(Exception):
    """Base exception for data-related errors."""

    pass


# --- Feature encoding errors ---


class FeatureConfigError(DataError):
    """
    Raised when feature configuration is invalid or cannot be loaded.

    This can happen when:
    - Config file not found
    - Invalid YAML/JSON syntax
    - Missing required keys in config
    - feature_order does not match the housing record fields
    """

    pass


class MissingFieldError(DataError):
    """
    Raised when a required input is missing while encoding keyword inputs.

    This can happen when:
    - encode_inputs() is called without one of the feature_order fields
    """

    pass


# --- Ingestion errors ---


class ParseError(DataError):
    """
    Raised when a CSV row cannot be parsed into a HousingRecord.

    This can happen when:
    - Row has the wrong number of fields
    - A numeric field is not parseable (or is NaN/Inf)
    - The row is the header line
    """

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


class LoadError(DataError):
    """
    Raised when a dataset cannot be loaded.

    Loading is all-or-nothing: the first malformed row aborts the load.
    The underlying ParseError (if any) is available as __cause__.
    """

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


class EmptyDatasetError(LoadError):
    """
    Raised when no data rows remain after the header.

    Pass allow_empty=True to HousingDataset.load to get an empty dataset
    with zero bounds instead.
    """

    pass


# --- Split errors ---


class SplitError(DataError):
    """Raised when split parameters are invalid (train_ratio outside (0, 1])."""

    pass


# --- Warnings ---


class DegenerateColumnWarning(UserWarning):
    """
    Emitted when a feature or the price column has zero variance.

    Not fatal: the column normalizes to 0.0 everywhere and its correlation
    with every other column is 0.0.
    """

    pass

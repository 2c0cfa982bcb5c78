"""Data module: CSV ingestion, feature encoding, normalization and splitting."""

from .dataset import HousingDataset
from .errors import (
    DataError,
    DegenerateColumnWarning,
    EmptyDatasetError,
    FeatureConfigError,
    LoadError,
    MissingFieldError,
    ParseError,
    SplitError,
)
from .feature_encoder import FeatureEncoder
from .models import (
    CORRELATION_LABELS,
    CSV_COLUMNS,
    FEATURE_NAMES,
    FURNISHING_STATUSES,
    PRICE_LABEL,
    DatasetSplit,
    FeatureBounds,
    HousingRecord,
    HousingSample,
)
from .normalizer import denormalize, denormalize_array, normalize, normalize_array
from .record_parser import parse_fields, parse_flag, parse_line
from .splitter import DEFAULT_SEED, DEFAULT_TRAIN_RATIO, split_dataset

__all__ = [
    # Errors
    "DataError",
    "DegenerateColumnWarning",
    "EmptyDatasetError",
    "FeatureConfigError",
    "LoadError",
    "MissingFieldError",
    "ParseError",
    "SplitError",
    # Parsing
    "parse_fields",
    "parse_flag",
    "parse_line",
    # Feature encoding
    "FeatureEncoder",
    # Normalization
    "normalize",
    "denormalize",
    "normalize_array",
    "denormalize_array",
    # Dataset and splitting
    "HousingDataset",
    "split_dataset",
    "DEFAULT_SEED",
    "DEFAULT_TRAIN_RATIO",
    # Models
    "CORRELATION_LABELS",
    "CSV_COLUMNS",
    "FEATURE_NAMES",
    "FURNISHING_STATUSES",
    "PRICE_LABEL",
    "DatasetSplit",
    "FeatureBounds",
    "HousingRecord",
    "HousingSample",
]

"""Feature encoder for converting housing records to model input vectors."""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import fields
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from .errors import FeatureConfigError, MissingFieldError
from .models import HousingRecord
from .record_parser import parse_flag

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "mappings" / "feature_config.yaml"

# Record fields that may appear in feature_order (price is the target)
_ENCODABLE_FIELDS = frozenset(f.name for f in fields(HousingRecord)) - {"price"}


class FeatureEncoder:
    """
    Encodes HousingRecords into fixed-order float64 feature vectors.

    Loads feature configuration and categorical mappings from YAML/JSON files.
    Booleans encode to 1.0/0.0, categoricals to their ordinal code and numeric
    fields pass through. Encoding itself never fails for a HousingRecord.
    """

    def __init__(self, config_path: Path | None = None):
        """
        Initialize encoder with feature configuration.

        Args:
            config_path: Path to feature_config.yaml. If None, uses default location.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self._config_path = Path(config_path)
        self._mappings_dir = self._config_path.parent

        self._load_config()
        self._validate_feature_order()
        self._load_mappings()

        logger.debug(
            f"FeatureEncoder initialized with {self.get_feature_count()} features "
            f"from {self._config_path}"
        )

    def _load_config(self) -> None:
        """Load feature configuration from YAML."""
        try:
            with open(self._config_path) as f:
                self._config = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise FeatureConfigError(
                f"Config file not found: {self._config_path}"
            ) from e
        except yaml.YAMLError as e:
            raise FeatureConfigError(f"Invalid YAML in feature config: {e}") from e

        if not isinstance(self._config, dict):
            raise FeatureConfigError("Feature config must be a mapping")

        required_keys = {
            "numeric_fields",
            "boolean_fields",
            "categorical_fields",
            "feature_order",
        }
        missing = required_keys - self._config.keys()
        if missing:
            raise FeatureConfigError(
                f"Feature config missing required keys: {sorted(missing)}"
            )
        self._config.setdefault("categorical_defaults", {})

    def _validate_feature_order(self) -> None:
        """Every feature must be a record field declared in exactly one kind."""
        order = self._config["feature_order"]
        if not order:
            raise FeatureConfigError("feature_order is empty")

        duplicates = sorted({f for f in order if order.count(f) > 1})
        if duplicates:
            raise FeatureConfigError(f"Duplicate fields in feature_order: {duplicates}")

        unknown = [f for f in order if f not in _ENCODABLE_FIELDS]
        if unknown:
            raise FeatureConfigError(
                f"feature_order contains fields that are not record fields: {unknown}. "
                f"Available fields: {sorted(_ENCODABLE_FIELDS)}"
            )

        kinds = (
            set(self._config["numeric_fields"]),
            set(self._config["boolean_fields"]),
            set(self._config["categorical_fields"]),
        )
        for field in order:
            declared = sum(field in kind for kind in kinds)
            if declared != 1:
                raise FeatureConfigError(
                    f"Field '{field}' must be declared in exactly one of "
                    f"numeric_fields, boolean_fields, categorical_fields"
                )

    def _load_mappings(self) -> None:
        """Load categorical mappings from JSON files."""
        self._mappings: dict[str, dict[str, int]] = {}

        for field, filename in self._config["categorical_fields"].items():
            mapping_path = self._mappings_dir / filename
            try:
                with open(mapping_path) as f:
                    self._mappings[field] = json.load(f)
            except FileNotFoundError as e:
                raise FeatureConfigError(
                    f"Mapping file not found for field '{field}': {mapping_path}"
                ) from e
            except json.JSONDecodeError as e:
                raise FeatureConfigError(
                    f"Invalid JSON in mapping file for field '{field}': {e}"
                ) from e

            if not self._mappings[field]:
                raise FeatureConfigError(f"Mapping for field '{field}' is empty")

            default = self._config["categorical_defaults"].get(field)
            if default is not None and default not in self._mappings[field]:
                raise FeatureConfigError(
                    f"Default '{default}' for field '{field}' is not in its mapping"
                )

    def encode(self, records: Iterable[HousingRecord]) -> np.ndarray:
        """
        Encode a batch of records.

        Args:
            records: Housing records

        Returns:
            np.ndarray of shape (len(records), num_features), dtype float64
        """
        batch = [self._encode_values(record.as_dict()) for record in records]
        if not batch:
            return np.zeros((0, self.get_feature_count()), dtype=np.float64)
        return np.array(batch, dtype=np.float64)

    def encode_record(self, record: HousingRecord) -> np.ndarray:
        """Encode a single record to shape (num_features,)."""
        return np.array(self._encode_values(record.as_dict()), dtype=np.float64)

    def encode_inputs(self, **inputs: Any) -> np.ndarray:
        """
        Encode keyword inputs (e.g. from an interactive form) to a raw vector.

        Uses the same code path as record encoding so both sides share the
        feature order. Booleans may be bools or "yes"/"no" strings.

        Raises:
            MissingFieldError: If a feature_order field is not provided
        """
        missing = [f for f in self._config["feature_order"] if f not in inputs]
        if missing:
            raise MissingFieldError(f"Missing required inputs: {missing}")
        return np.array(self._encode_values(inputs), dtype=np.float64)

    def _encode_values(self, values: Mapping[str, Any]) -> list[float]:
        """Encode a field mapping according to feature_order."""
        features = []
        boolean_fields = self._config["boolean_fields"]
        categorical_fields = self._config["categorical_fields"]

        for field in self._config["feature_order"]:
            value = values[field]
            if field in boolean_fields:
                features.append(_encode_bool(value))
            elif field in categorical_fields:
                features.append(float(self._encode_categorical(field, value)))
            else:
                features.append(float(value))

        return features

    def _encode_categorical(self, field: str, value: str) -> int:
        """Encode categorical value to integer, falling back to the default."""
        mapping = self._mappings[field]
        if value in mapping:
            return mapping[value]

        default = self._config["categorical_defaults"].get(field)
        if default is None:
            # Without a configured default, unmapped values take the last code
            return max(mapping.values())
        return mapping[default]

    def get_feature_names(self) -> list[str]:
        """Return ordered list of feature names."""
        return list(self._config["feature_order"])

    def get_feature_count(self) -> int:
        """Return total number of features in encoded output."""
        return len(self._config["feature_order"])

    def get_categorical_mapping(self, field: str) -> dict[str, int]:
        """Return mapping for a categorical field."""
        if field not in self._mappings:
            raise FeatureConfigError(f"No mapping for field: {field}")
        return self._mappings[field].copy()


def _encode_bool(value: Any) -> float:
    if isinstance(value, str):
        return 1.0 if parse_flag(value) else 0.0
    return 1.0 if value else 0.0

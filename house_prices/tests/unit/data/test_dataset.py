"""Tests for HousingDataset loading, bounds and normalization."""

import warnings
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

from house_prices.data import (
    DegenerateColumnWarning,
    EmptyDatasetError,
    HousingDataset,
    HousingRecord,
    LoadError,
    ParseError,
)

HEADER = (
    "price,area,bedrooms,bathrooms,stories,mainroad,guestroom,basement,"
    "hotwaterheating,airconditioning,parking,prefarea,furnishingstatus"
)


class TestLoad:
    """Tests for HousingDataset.load / load_csv."""

    def test_load_csv(self, housing_dataset: HousingDataset) -> None:
        """The sample CSV loads all 12 data rows."""
        assert len(housing_dataset) == 12
        assert housing_dataset.input_dimension == 12
        assert housing_dataset.records[0].price == 13_300_000.0

    def test_header_is_skipped(self) -> None:
        """Exactly one header row is skipped."""
        dataset = HousingDataset.load(
            [HEADER, "100,50,1,1,1,yes,no,no,no,no,0,no,furnished"]
        )

        assert len(dataset) == 1

    def test_without_header(self) -> None:
        """has_header=False parses the first row as data."""
        dataset = HousingDataset.load(
            ["100,50,1,1,1,yes,no,no,no,no,0,no,furnished"], has_header=False
        )

        assert len(dataset) == 1

    def test_blank_lines_are_skipped(self) -> None:
        """Blank lines (e.g. a trailing newline) are not data rows."""
        dataset = HousingDataset.load(
            [
                HEADER,
                "100,50,1,1,1,yes,no,no,no,no,0,no,furnished",
                "",
                "   ",
                "200,60,2,1,1,no,no,no,no,no,1,no,unfurnished",
            ]
        )

        assert len(dataset) == 2

    def test_accepts_field_lists(self) -> None:
        """Rows may be pre-split field sequences (e.g. from csv.reader)."""
        dataset = HousingDataset.load(
            [HEADER.split(","), "100,50,1,1,1,yes,no,no,no,no,0,no,furnished".split(",")]
        )

        assert dataset.records[0].area == 50.0

    def test_malformed_row_aborts_load(self) -> None:
        """One bad row fails the whole load, chaining the ParseError."""
        rows = [
            HEADER,
            "100,50,1,1,1,yes,no,no,no,no,0,no,furnished",
            "oops,60,2,1,1,no,no,no,no,no,1,no,unfurnished",
        ]

        with pytest.raises(LoadError, match="Line 3") as exc_info:
            HousingDataset.load(rows)

        assert exc_info.value.line_number == 3
        assert isinstance(exc_info.value.__cause__, ParseError)

    def test_header_only_raises_empty(self) -> None:
        """No data rows after the header is an explicit empty-dataset error."""
        with pytest.raises(EmptyDatasetError):
            HousingDataset.load([HEADER])

    def test_empty_dataset_is_a_load_error(self) -> None:
        """Callers catching LoadError also catch the empty case."""
        assert issubclass(EmptyDatasetError, LoadError)

    def test_missing_file_raises_load_error(self, tmp_path: Path) -> None:
        """Unreadable files are reported as LoadError."""
        with pytest.raises(LoadError, match="Cannot read dataset file"):
            HousingDataset.load_csv(tmp_path / "missing.csv")

    def test_non_utf8_file_raises_load_error(self, tmp_path: Path) -> None:
        """Files must be UTF-8."""
        path = tmp_path / "latin1.csv"
        path.write_bytes(HEADER.encode() + b"\n\xff\xfe\n")

        with pytest.raises(LoadError, match="not valid UTF-8"):
            HousingDataset.load_csv(path)


    def test_rows_split_on_line_breaks_only(self, tmp_path: Path) -> None:
        """Form feeds and other Unicode separators don't start a new row."""
        path = tmp_path / "formfeed.csv"
        rows = [
            "4000000,5000\x0c,3,1,2,yes,no,no,no,no,1,no,furnished",
            "5000000,6000,3,1,2,yes,no,no,no,no,1,no,semi-furnished\u2028",
        ]
        path.write_text("\r\n".join([HEADER, *rows]) + "\r\n", encoding="utf-8")

        dataset = HousingDataset.load_csv(path)

        assert len(dataset) == 2
        assert dataset.records[0].area == 5000.0
        assert dataset.records[1].furnishing_status == "semi-furnished"


class TestEmptyDataset:
    """Downstream behaviour of an allowed empty dataset."""

    @pytest.fixture
    def empty(self) -> HousingDataset:
        return HousingDataset.load([HEADER], allow_empty=True)

    def test_bounds_are_zero(self, empty: HousingDataset) -> None:
        """min == max == 0 for every feature and the price."""
        assert empty.is_empty
        np.testing.assert_array_equal(empty.bounds.feature_min, np.zeros(12))
        np.testing.assert_array_equal(empty.bounds.feature_max, np.zeros(12))
        assert empty.bounds.price_min == 0.0
        assert empty.bounds.price_max == 0.0

    def test_dimension_comes_from_encoder(self, empty: HousingDataset) -> None:
        """The feature count is still known without records."""
        assert empty.input_dimension == 12

    def test_matrices_are_empty(self, empty: HousingDataset) -> None:
        """Stacking no samples yields (0, d) and (0, 1) matrices."""
        assert empty.feature_matrix().shape == (0, 12)
        assert empty.target_matrix().shape == (0, 1)
        assert empty.mean_area() == 0.0


class TestBounds:
    """Tests for bounds learned at load time."""

    def test_bounds_cover_full_collection(self, housing_dataset: HousingDataset) -> None:
        """Bounds are the column min/max over every record."""
        bounds = housing_dataset.bounds
        raw = housing_dataset.raw_feature_matrix()

        np.testing.assert_array_equal(bounds.feature_min, raw.min(axis=0))
        np.testing.assert_array_equal(bounds.feature_max, raw.max(axis=0))
        assert bounds.price_min == 1_750_000.0
        assert bounds.price_max == 13_300_000.0
        assert bounds.feature_min[0] == 2400.0
        assert bounds.feature_max[0] == 16200.0

    def test_min_not_greater_than_max(self, housing_dataset: HousingDataset) -> None:
        """min[f] <= max[f] for every feature."""
        bounds = housing_dataset.bounds

        assert np.all(bounds.feature_min <= bounds.feature_max)

    def test_normalized_features_in_unit_interval(
        self, housing_dataset: HousingDataset
    ) -> None:
        """Every normalized value of a non-degenerate feature is in [0, 1]."""
        features = housing_dataset.feature_matrix()
        targets = housing_dataset.target_matrix()

        assert features.shape == (12, 12)
        assert targets.shape == (12, 1)
        assert np.all((features >= 0.0) & (features <= 1.0))
        assert np.all((targets >= 0.0) & (targets <= 1.0))

    def test_bounds_are_read_only(self, housing_dataset: HousingDataset) -> None:
        """Shared bounds cannot be mutated in place."""
        with pytest.raises(ValueError):
            housing_dataset.bounds.feature_min[0] = 0.0

    def test_denormalize_price_round_trip(self, housing_dataset: HousingDataset) -> None:
        """Normalized targets map back to the original prices."""
        for sample in housing_dataset.samples:
            restored = housing_dataset.denormalize_price(float(sample.normalized_target[0]))
            assert restored == pytest.approx(sample.price)

    def test_mean_area(self, housing_dataset: HousingDataset) -> None:
        """Average living area over all records."""
        expected = np.mean([r.area for r in housing_dataset.records])

        assert housing_dataset.mean_area() == pytest.approx(expected)


class TestDegenerateColumns:
    """Tests for zero-variance columns."""

    def test_constant_feature_normalizes_to_zero(
        self, make_record: Callable[..., HousingRecord]
    ) -> None:
        """A feature equal to 5 everywhere is 0.0 for every record, with a warning."""
        records = [make_record(bedrooms=5, price=1000.0 * (i + 1)) for i in range(4)]

        with pytest.warns(DegenerateColumnWarning, match="bedrooms"):
            dataset = HousingDataset(records)

        bedrooms = dataset.feature_names.index("bedrooms")
        np.testing.assert_array_equal(dataset.feature_matrix()[:, bedrooms], np.zeros(4))
        assert bedrooms in dataset.bounds.degenerate_features

    def test_constant_price_normalizes_to_zero(
        self, make_record: Callable[..., HousingRecord]
    ) -> None:
        """Constant targets normalize to 0.0 and denormalize back to that price."""
        records = [make_record(price=500.0, area=100.0 * (i + 1)) for i in range(3)]

        with pytest.warns(DegenerateColumnWarning, match="price"):
            dataset = HousingDataset(records)

        np.testing.assert_array_equal(dataset.target_matrix(), np.zeros((3, 1)))
        assert dataset.denormalize_price(0.7) == 500.0

    def test_no_warning_when_all_columns_vary(self, varied_records: list) -> None:
        """Fully varied data loads silently."""
        with warnings.catch_warnings():
            warnings.simplefilter("error", DegenerateColumnWarning)
            HousingDataset(varied_records)

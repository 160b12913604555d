"""Tests for export configuration."""

import numpy as np
import pytest

from tabular_bsdf.utils.config import ExportConfig, SourceType


class TestExportConfig:
    """Tests for ExportConfig validation."""

    def test_defaults(self):
        config = ExportConfig()

        assert config.num_expanded_in_theta == 10
        assert (config.min_spec_theta, config.min_spec_phi) == (181, 73)
        assert (config.generic_in_theta, config.generic_in_phi) == (19, 37)
        assert (config.generic_spec_theta, config.generic_spec_phi) == (91, 73)
        assert config.max_value == 10000.0
        assert config.source == SourceType.MEASURED
        assert config.comment is None

    def test_source_from_string(self):
        config = ExportConfig(source="Edited")
        assert config.source == SourceType.EDITED

    def test_invalid_source(self):
        with pytest.raises(ValueError):
            ExportConfig(source="Simulated")

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            ExportConfig(min_spec_phi=1)

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            ExportConfig(max_value=0.0)
        with pytest.raises(ValueError):
            ExportConfig(max_albedo=-1.0)
        with pytest.raises(ValueError):
            ExportConfig(spec_theta_exponent=0.0)

    def test_multiline_comment(self):
        """The comment is written as a single header line."""
        with pytest.raises(ValueError):
            ExportConfig(comment="first\nsecond")

    def test_to_dict(self):
        data = ExportConfig(comment="Sample paint").to_dict()

        assert data["source"] == "Measured"
        assert data["comment"] == "Sample paint"
        assert data["max_albedo"] == 1.0

    def test_stored_max_value(self):
        """Exported values are stored values times pi."""
        config = ExportConfig(max_value=np.pi)
        assert config.stored_max_value == pytest.approx(1.0)

"""Configuration of conversion, arrangement and export."""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class SourceType(Enum):
    """Origin of the exported data, written to the ``Source`` header line."""
    MEASURED = "Measured"
    GENERATED = "Generated"
    EDITED = "Edited"


@dataclass
class ExportConfig:
    """Configuration for converting and exporting tabulated BRDFs.

    Attributes:
        num_expanded_in_theta: Incoming polar samples created when the input
            has a single incoming polar angle
        min_spec_theta: Minimum spec_theta resolution when converting
            spherical grids
        min_spec_phi: Minimum spec_phi resolution when converting spherical grids
        generic_in_theta: in_theta resolution for generic sources
        generic_in_phi: in_phi resolution for anisotropic generic sources
        generic_spec_theta: spec_theta resolution for generic sources
        generic_spec_phi: spec_phi resolution for generic sources
        spec_theta_exponent: Warp exponent of the generic spec_theta axis
        max_value: Upper bound of every exported channel value. Exported
            values are stored values times pi, so the energy correction
            bounds stored values by ``max_value / pi``
        max_albedo: Directional-hemispherical reflectance allowed per incoming
            direction and channel
        source: Value of the ``Source`` header line
        comment: Optional free-text comment written to the file header
    """

    num_expanded_in_theta: int = 10
    min_spec_theta: int = 181
    min_spec_phi: int = 73
    generic_in_theta: int = 19
    generic_in_phi: int = 37
    generic_spec_theta: int = 91
    generic_spec_phi: int = 73
    spec_theta_exponent: float = 2.0
    max_value: float = 10000.0
    max_albedo: float = 1.0
    source: SourceType = SourceType.MEASURED
    comment: Optional[str] = None

    def __post_init__(self):
        """Validate configuration."""
        resolutions = {
            "num_expanded_in_theta": self.num_expanded_in_theta,
            "min_spec_theta": self.min_spec_theta,
            "min_spec_phi": self.min_spec_phi,
            "generic_in_theta": self.generic_in_theta,
            "generic_in_phi": self.generic_in_phi,
            "generic_spec_theta": self.generic_spec_theta,
            "generic_spec_phi": self.generic_spec_phi,
        }
        for name, value in resolutions.items():
            if value < 2:
                raise ValueError(f"{name} must be at least 2, got {value}")

        if self.spec_theta_exponent <= 0:
            raise ValueError(f"spec_theta_exponent must be positive, got {self.spec_theta_exponent}")
        if self.max_value <= 0:
            raise ValueError(f"max_value must be positive, got {self.max_value}")
        if self.max_albedo <= 0:
            raise ValueError(f"max_albedo must be positive, got {self.max_albedo}")

        if not isinstance(self.source, SourceType):
            self.source = SourceType(self.source)

        if self.comment is not None and "\n" in self.comment:
            raise ValueError("comment must be a single line")

    @property
    def stored_max_value(self) -> float:
        """Bound of stored values that keeps exported values within ``max_value``."""
        return self.max_value / math.pi

    def to_dict(self) -> dict:
        """Plain dictionary of the configuration."""
        data = asdict(self)
        data["source"] = self.source.value
        return data

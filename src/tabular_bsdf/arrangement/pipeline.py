"""Arrangement of canonical grids into export-ready grids."""

import logging
from functools import partial
from typing import Callable, List, Optional, Tuple

from ..brdf.brdf import DataType, Representation, SpecularCoordinatesBrdf
from ..utils.config import ExportConfig
from .steps import (
    expand_in_theta,
    equalize_overlapping_samples,
    fill_symmetric_samples,
    close_periodic_boundary,
    fix_energy_conservation,
    fill_spectra_at_grazing_incidence,
)

logger = logging.getLogger(__name__)

Step = Callable[[SpecularCoordinatesBrdf], SpecularCoordinatesBrdf]


class ArrangementPipeline:
    """Sequence of repair passes producing an export-ready canonical grid.

    Steps, in order:
    1. Incoming polar expansion (single in_theta -> ``num_expanded_in_theta``)
    2. Overlap equalization at coordinate singularities
    3. Azimuthal symmetrization of one-sided data
    4. Periodic boundary duplication (spec_phi 0 -> 2*pi)
    5. Energy conservation fix
    6. Grazing incidence zero-fill (BTDF only)

    The pipeline works on a private copy; the input grid is never modified.

    Example:
        >>> pipeline = ArrangementPipeline(ExportConfig(max_value=100.0))
        >>> arranged = pipeline.run(brdf, DataType.BRDF)
    """

    def __init__(self, config: Optional[ExportConfig] = None):
        self.config = config or ExportConfig()

    def steps(self, data_type: DataType = DataType.BRDF) -> List[Tuple[str, Step]]:
        """Named steps run for ``data_type``."""
        cfg = self.config
        steps = [
            ("expand_in_theta", partial(expand_in_theta, num_in_theta=cfg.num_expanded_in_theta)),
            ("equalize_overlapping_samples", equalize_overlapping_samples),
            ("fill_symmetric_samples", fill_symmetric_samples),
            ("close_periodic_boundary", close_periodic_boundary),
            ("fix_energy_conservation", partial(fix_energy_conservation,
                                                max_value=cfg.stored_max_value,
                                                max_albedo=cfg.max_albedo)),
        ]
        if data_type == DataType.BTDF:
            steps.append(("fill_spectra_at_grazing_incidence", fill_spectra_at_grazing_incidence))
        return steps

    def run(self, brdf: SpecularCoordinatesBrdf,
            data_type: DataType = DataType.BRDF) -> SpecularCoordinatesBrdf:
        """Arrange a canonical grid.

        Args:
            brdf: Canonical BRDF (not modified)
            data_type: Reflectance or transmittance data

        Returns:
            New arranged canonical BRDF
        """
        if brdf.representation != Representation.CANONICAL:
            raise ValueError(
                f"Arrangement requires a canonical grid, got {type(brdf).__name__}"
            )
        if not isinstance(data_type, DataType):
            raise ValueError(f"data_type must be a DataType, got {data_type!r}")

        working = brdf.copy()
        for name, step in self.steps(data_type):
            working = step(working)
            logger.debug("%s -> %s", name, working.sample_set.shape)

        return working


def arrange(brdf: SpecularCoordinatesBrdf, data_type: DataType = DataType.BRDF,
            config: Optional[ExportConfig] = None) -> SpecularCoordinatesBrdf:
    """Arrange a canonical grid with a default pipeline."""
    return ArrangementPipeline(config).run(brdf, data_type)

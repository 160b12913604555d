"""Arrangement of canonical grids for export."""

from .pipeline import ArrangementPipeline, arrange
from .steps import (
    expand_in_theta,
    equalize_overlapping_samples,
    fill_symmetric_samples,
    close_periodic_boundary,
    fix_energy_conservation,
    fill_spectra_at_grazing_incidence,
    compute_reflectances,
    azimuth_weights,
)

__all__ = [
    "ArrangementPipeline",
    "arrange",
    "expand_in_theta",
    "equalize_overlapping_samples",
    "fill_symmetric_samples",
    "close_periodic_boundary",
    "fix_energy_conservation",
    "fill_spectra_at_grazing_incidence",
    "compute_reflectances",
    "azimuth_weights",
]

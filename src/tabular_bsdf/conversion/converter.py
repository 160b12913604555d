"""Conversion of arbitrary BRDF grids to the canonical specular-offset grid."""

import logging
from typing import Optional

import numpy as np

from ..brdf.brdf import Brdf, Representation, SpecularCoordinatesBrdf
from ..brdf.processor import fill_back_side
from ..common import coordinates
from ..common.array_util import create_exponential
from ..utils.config import ExportConfig

logger = logging.getLogger(__name__)


class CoordinateConverter:
    """Builds canonical grids from BRDFs of any representation.

    The strategy depends on the representation tag of the source:

    - CANONICAL: deep copy.
    - SPHERICAL: the incoming axes are kept, the specular axes are created
      with at least ``min_spec_theta`` x ``min_spec_phi`` samples and the
      source is resampled.
    - GENERIC: fixed canonical axes are created from scratch and the source
      is resampled.

    The source is never modified.
    """

    def __init__(self, config: Optional[ExportConfig] = None):
        self.config = config or ExportConfig()

    def convert(self, brdf: Brdf) -> SpecularCoordinatesBrdf:
        """Convert ``brdf`` to a new canonical grid."""
        representation = brdf.representation

        if representation == Representation.CANONICAL:
            logger.info("Copying canonical grid %s.", brdf.sample_set.shape)
            return brdf.copy()
        if representation == Representation.SPHERICAL:
            return self._convert_spherical(brdf)
        if representation == Representation.GENERIC:
            return self._convert_generic(brdf)

        raise ValueError(f"Unknown representation: {representation}")

    def _convert_spherical(self, brdf: Brdf) -> SpecularCoordinatesBrdf:
        ss = brdf.sample_set
        num_spec_theta = max(self.config.min_spec_theta, ss.num_angles2)
        num_spec_phi = max(self.config.min_spec_phi, ss.num_angles3)

        spec_theta = np.linspace(0.0, coordinates.SPECULAR_MAX_ANGLES[2], num_spec_theta)
        spec_phi = np.linspace(0.0, coordinates.SPECULAR_MAX_ANGLES[3], num_spec_phi)

        logger.info("Resampling spherical grid %s to %d x %d specular samples.",
                    ss.shape, num_spec_theta, num_spec_phi)
        converted = SpecularCoordinatesBrdf.from_brdf(
            brdf, ss.angles0, ss.angles1, spec_theta, spec_phi
        )
        fill_back_side(converted)
        return converted

    def _convert_generic(self, brdf: Brdf) -> SpecularCoordinatesBrdf:
        cfg = self.config
        max_angles = coordinates.SPECULAR_MAX_ANGLES

        in_theta = np.linspace(0.0, max_angles[0], cfg.generic_in_theta)
        if brdf.is_isotropic:
            in_phi = np.zeros(1)
        else:
            in_phi = np.linspace(0.0, max_angles[1], cfg.generic_in_phi)
        spec_theta = create_exponential(cfg.generic_spec_theta, max_angles[2], cfg.spec_theta_exponent)
        spec_phi = np.linspace(0.0, max_angles[3], cfg.generic_spec_phi)

        logger.info("Resampling %s onto a %d x %d x %d x %d canonical grid.",
                    type(brdf).__name__, in_theta.shape[0], in_phi.shape[0],
                    spec_theta.shape[0], spec_phi.shape[0])
        converted = SpecularCoordinatesBrdf.from_brdf(brdf, in_theta, in_phi, spec_theta, spec_phi)
        fill_back_side(converted)
        return converted


def to_canonical(brdf: Brdf, config: Optional[ExportConfig] = None) -> SpecularCoordinatesBrdf:
    """Convert ``brdf`` to a new canonical grid with a default converter."""
    return CoordinateConverter(config).convert(brdf)

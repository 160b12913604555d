"""Sampling contract of analytic reflectance models."""

from abc import ABC, abstractmethod

import numpy as np


class ReflectanceModel(ABC):
    """Base class of reflectance models consumed by tabulation and fitting.

    Implementations evaluate the model for batches of direction pairs; the
    formulas themselves live outside this package.

    Example:
        >>> class Lambertian(ReflectanceModel):
        ...     def __init__(self, albedo=(0.5, 0.5, 0.5)):
        ...         self.albedo = np.asarray(albedo)
        ...     def get_brdf_value(self, in_dir, out_dir):
        ...         return np.broadcast_to(self.albedo / np.pi, in_dir.shape).copy()
    """

    name = "Reflectance model"

    @abstractmethod
    def get_brdf_value(self, in_dir: np.ndarray, out_dir: np.ndarray) -> np.ndarray:
        """Evaluate the model.

        Args:
            in_dir: Unit incoming directions, shape (N, 3), z >= 0
            out_dir: Unit outgoing directions, shape (N, 3)

        Returns:
            RGB values, shape (N, 3)
        """

    def is_isotropic(self) -> bool:
        """Whether the model is invariant to rotation about the normal."""
        return True

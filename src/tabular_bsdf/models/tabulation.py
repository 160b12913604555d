"""Population of sample grids from reflectance models."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np
from tqdm import tqdm

from ..brdf.brdf import Brdf, DataType, Representation
from ..brdf.processor import fill_back_side
from ..common.color import ColorModel
from .reflectance_model import ReflectanceModel

logger = logging.getLogger(__name__)

# Lower bound of the z component of sampled directions
MIN_Z = 0.001


def _lift_directions(in_dir: np.ndarray, out_dir: np.ndarray, data_type: DataType):
    """Keep directions off the horizon and flip transmitted directions."""
    in_dir = in_dir.copy()
    out_dir = out_dir.copy()
    in_dir[..., 2] = np.maximum(in_dir[..., 2], MIN_Z)
    out_dir[..., 2] = np.maximum(out_dir[..., 2], MIN_Z)

    degenerate = ((np.abs(out_dir[..., 0]) <= MIN_Z)
                  & (np.abs(out_dir[..., 1]) <= MIN_Z)
                  & (out_dir[..., 2] <= MIN_Z))
    out_dir[degenerate, 0] = 1.0

    in_dir /= np.linalg.norm(in_dir, axis=-1, keepdims=True)
    out_dir /= np.linalg.norm(out_dir, axis=-1, keepdims=True)

    if data_type == DataType.BTDF:
        out_dir[..., 2] = -out_dir[..., 2]
    return in_dir, out_dir


def setup_tabular_brdf(
    model: ReflectanceModel,
    brdf: Brdf,
    data_type: DataType = DataType.BRDF,
    max_value: float = 10000.0,
    max_workers: Optional[int] = None,
    show_progress: bool = False
) -> bool:
    """Fill the sample grid of ``brdf`` with values of ``model``.

    Slices of axis 2 are evaluated in parallel; each worker writes one
    disjoint slice of the pre-allocated spectra array. For canonical grids
    the samples whose outgoing direction is below the surface are skipped
    and filled from their neighbours afterwards.

    Args:
        model: Reflectance model to sample
        brdf: BRDF whose sample set is overwritten (RGB or MONOCHROMATIC)
        data_type: BRDF or BTDF; BTDF samples the model with transmitted
            outgoing directions
        max_value: Upper clamp of sampled values
        max_workers: Number of worker threads (None uses the executor default)
        show_progress: Whether to show a progress bar

    Returns:
        False if the color model of the grid is not supported, else True
    """
    ss = brdf.sample_set
    color_model = ss.color_model
    if color_model not in (ColorModel.RGB, ColorModel.MONOCHROMATIC):
        logger.error("Unsupported color model: %s", color_model.name)
        return False

    back_side_fillable = brdf.representation == Representation.CANONICAL
    grids = np.meshgrid(ss.angles0, ss.angles1, ss.angles3, indexing='ij')

    def fill_slice(i2: int) -> None:
        angle2 = np.full(grids[0].shape, ss.angles2[i2])
        in_dir, out_dir = brdf.to_xyz(grids[0], grids[1], angle2, grids[2])

        skip = out_dir[..., 2] < 0.0 if back_side_fillable else np.zeros(grids[0].shape, dtype=bool)
        in_dir, out_dir = _lift_directions(in_dir, out_dir, data_type)

        values = np.asarray(model.get_brdf_value(in_dir.reshape(-1, 3), out_dir.reshape(-1, 3)),
                            dtype=np.float64)
        if not np.all(np.isfinite(values)):
            raise ValueError(f"{model.name} returned non-finite values")
        values = values.reshape(grids[0].shape + (3,))

        if color_model == ColorModel.RGB:
            spectra = np.minimum(values, max_value)
        else:
            spectra = np.minimum(values.sum(axis=-1) / 3.0, max_value)[..., np.newaxis]

        current = ss.spectra[:, :, i2]
        ss.spectra[:, :, i2] = np.where(skip[..., np.newaxis], current, spectra)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(fill_slice, range(ss.num_angles2))
        for _ in tqdm(results, total=ss.num_angles2, desc=f"Tabulating {model.name}",
                      disable=not show_progress):
            pass

    if back_side_fillable:
        fill_back_side(brdf)

    return True

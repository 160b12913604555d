"""Writer of the DDR tabular BRDF/BTDF text format.

A DDR file stores a canonical grid (incoming polar/azimuth angles and
specular-offset polar/azimuth angles) as blocks of values per channel.
Angles are written in degrees. Values are multiplied by pi and clamped
into [0, max_value] of the export configuration.
"""

import io
import logging
from pathlib import Path
from typing import Optional, TextIO, Union

import numpy as np

from .. import __version__
from ..arrangement.pipeline import ArrangementPipeline
from ..brdf.brdf import Brdf, DataType, Representation, SpecularCoordinatesBrdf
from ..brdf.btdf import Btdf
from ..common.color import ColorModel, xyz_to_srgb
from ..conversion.converter import CoordinateConverter
from ..utils.config import ExportConfig

logger = logging.getLogger(__name__)

RGB_CHANNEL_NAMES = ("red", "green", "blue")


def _format_values(values) -> str:
    """Space-prefixed ``%g`` formatting of a sequence of numbers."""
    return "".join(f" {float(v):g}" for v in values)


class DdrWriter:
    """Exports BRDFs and BTDFs to DDR files.

    Example:
        >>> writer = DdrWriter(ExportConfig(comment="Sample paint"))
        >>> writer.write_brdf("paint.ddr", brdf, DataType.BRDF)
        True
    """

    def __init__(self, config: Optional[ExportConfig] = None):
        self.config = config or ExportConfig()

    def convert(self, brdf: Brdf) -> SpecularCoordinatesBrdf:
        """Convert any BRDF to a new canonical grid."""
        return CoordinateConverter(self.config).convert(brdf)

    def arrange(self, brdf: SpecularCoordinatesBrdf,
                data_type: DataType = DataType.BRDF) -> SpecularCoordinatesBrdf:
        """Arrange a canonical grid for export."""
        return ArrangementPipeline(self.config).run(brdf, data_type)

    def write_brdf(self, path: Union[str, Path], brdf: Union[Brdf, Btdf],
                   data_type: DataType = DataType.BRDF) -> bool:
        """Validate, convert, arrange and write a BRDF or BTDF.

        Args:
            path: Destination file
            brdf: Source data (not modified). A Btdf is always written as
                transmittance data.
            data_type: Reflectance or transmittance data

        Returns:
            False if the data contains non-finite values or the file cannot
            be written, else True
        """
        if isinstance(brdf, Btdf):
            brdf = brdf.brdf
            data_type = DataType.BTDF

        if not brdf.sample_set.validate():
            logger.error("Could not write %s: the data contains non-finite values.", path)
            return False

        arranged = self.arrange(self.convert(brdf), data_type)
        return self.write(path, arranged)

    def write(self, path: Union[str, Path], brdf: SpecularCoordinatesBrdf) -> bool:
        """Write an arranged canonical grid.

        The document is rendered in memory first. If writing fails, a file
        created by this call is removed; an existing destination is kept.

        Returns:
            False if the file cannot be written, else True
        """
        buffer = io.StringIO()
        self.output(brdf, buffer)

        path = Path(path)
        created = not path.exists()
        try:
            with open(path, "w") as f:
                f.write(buffer.getvalue())
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            if created and path.is_file():
                path.unlink()
            return False

        logger.info("Wrote %s.", path)
        return True

    def output(self, brdf: SpecularCoordinatesBrdf, stream: TextIO) -> None:
        """Write a canonical grid in DDR format to a text stream."""
        if brdf.representation != Representation.CANONICAL:
            raise ValueError(f"DDR output requires a canonical grid, got {type(brdf).__name__}")

        ss = brdf.sample_set
        cfg = self.config

        stream.write(f";; This file is generated by tabular-bsdf-{__version__}.\n")
        if cfg.comment:
            stream.write(f";; {cfg.comment}\n")
        stream.write("\n")

        stream.write(f"Source {cfg.source.value}\n")

        if ss.is_isotropic:
            stream.write("TypeSym ASymmetrical\n")
        else:
            stream.write("TypeSym ASymmetrical 4D\n")

        if ss.num_wavelengths == 1:
            color_model = ColorModel.MONOCHROMATIC
            stream.write("TypeColorModel BW\n")
        elif ss.color_model in (ColorModel.RGB, ColorModel.XYZ):
            color_model = ColorModel.RGB
            stream.write("TypeColorModel RGB\n")
        else:
            color_model = ColorModel.SPECTRAL
            stream.write(f"TypeColorModel spectral {ss.num_wavelengths}\n")

        stream.write("TypeData Luminance Absolute\n")

        in_phi_deg = np.degrees(brdf.in_phi)
        in_theta_deg = np.degrees(brdf.in_theta)

        if not ss.is_isotropic:
            stream.write(f"psi {brdf.num_in_phi}\n")
            stream.write(_format_values(in_phi_deg) + "\n")

        stream.write(f"sigma {brdf.num_in_theta}\n")
        stream.write(_format_values(in_theta_deg) + "\n")

        offsets = brdf.specular_offsets
        if offsets is not None and offsets.shape[0] == brdf.num_in_theta:
            stream.write("sigmat" + _format_values(np.degrees(offsets)) + "\n")

        stream.write(f"phi {brdf.num_spec_phi}\n")
        stream.write(_format_values(np.degrees(brdf.spec_phi)) + "\n")

        stream.write(f"theta {brdf.num_spec_theta}\n")
        stream.write(_format_values(np.degrees(brdf.spec_theta)) + "\n")

        values = ss.spectra
        if ss.color_model == ColorModel.XYZ:
            values = xyz_to_srgb(values)
        # The color conversion can push arranged values past the bound
        values = np.clip(values * np.pi, 0.0, cfg.max_value)

        for wl_index in range(ss.num_wavelengths):
            if color_model == ColorModel.MONOCHROMATIC:
                stream.write("bw\n")
            elif color_model == ColorModel.RGB:
                stream.write(f"{RGB_CHANNEL_NAMES[wl_index]}\n")
            else:
                stream.write(f"wl {float(ss.wavelengths[wl_index]):g}\n")

            stream.write(" kbdf\n")
            stream.write(" " + " 1.0" * brdf.num_in_theta + "\n")
            stream.write(" def\n")

            for i1 in range(brdf.num_in_phi):
                stream.write(f";; Psi = {in_phi_deg[i1]:g}\n")
                for i0 in range(brdf.num_in_theta):
                    stream.write(f";; Sigma = {in_theta_deg[i0]:g}\n")
                    for i3 in range(brdf.num_spec_phi):
                        stream.write(_format_values(values[i0, i1, :, i3, wl_index]) + "\n")

            stream.write(" enddef\n")


def write_ddr(path: Union[str, Path], brdf: Union[Brdf, Btdf],
              data_type: DataType = DataType.BRDF,
              config: Optional[ExportConfig] = None) -> bool:
    """Validate, convert, arrange and write ``brdf`` to a DDR file."""
    return DdrWriter(config).write_brdf(path, brdf, data_type)

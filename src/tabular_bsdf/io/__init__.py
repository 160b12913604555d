"""File export."""

from .ddr_writer import DdrWriter, write_ddr

__all__ = ["DdrWriter", "write_ddr"]

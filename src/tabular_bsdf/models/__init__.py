"""Reflectance model contract and tabulation."""

from .reflectance_model import ReflectanceModel
from .tabulation import setup_tabular_brdf

__all__ = ["ReflectanceModel", "setup_tabular_brdf"]

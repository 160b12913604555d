"""Conversions between angle tuples and incoming/outgoing direction pairs.

All functions are vectorised: angle arguments broadcast against each other
and directions are arrays of shape (..., 3) in a z-up frame. Azimuths are
returned in [0, 2*pi).
"""

from typing import Tuple

import numpy as np

PI = np.pi
PI_2 = 0.5 * np.pi
TWO_PI = 2.0 * np.pi

# Angle ranges of the supported coordinate systems, indexed by axis
SPECULAR_MAX_ANGLES = (PI_2, TWO_PI, PI, TWO_PI)
SPHERICAL_MAX_ANGLES = (PI_2, TWO_PI, PI_2, TWO_PI)
HALF_DIFFERENCE_MAX_ANGLES = (PI_2, TWO_PI, PI_2, TWO_PI)


def spherical_to_xyz(theta, phi) -> np.ndarray:
    """Convert polar/azimuthal angles to unit vectors, shape (..., 3)."""
    theta, phi = np.broadcast_arrays(np.asarray(theta, dtype=np.float64),
                                     np.asarray(phi, dtype=np.float64))
    sin_theta = np.sin(theta)
    return np.stack([
        sin_theta * np.cos(phi),
        sin_theta * np.sin(phi),
        np.cos(theta)
    ], axis=-1)


def xyz_to_spherical(directions) -> Tuple[np.ndarray, np.ndarray]:
    """Convert unit vectors to (theta, phi)."""
    directions = np.asarray(directions, dtype=np.float64)
    x, y, z = directions[..., 0], directions[..., 1], directions[..., 2]
    theta = np.arccos(np.clip(z, -1.0, 1.0))
    phi = np.mod(np.arctan2(y, x), TWO_PI)
    return theta, phi


def normalize(directions) -> np.ndarray:
    """Normalize vectors along the last axis. Zero vectors are left as is."""
    directions = np.asarray(directions, dtype=np.float64)
    norm = np.linalg.norm(directions, axis=-1, keepdims=True)
    return directions / np.where(norm > 0.0, norm, 1.0)


def is_downward_dir(directions) -> np.ndarray:
    """True where a direction points below the surface (z < 0)."""
    return np.asarray(directions)[..., 2] < 0.0


def rotate_y(directions, angle) -> np.ndarray:
    """Rotate vectors about the y axis by ``angle`` (right-handed)."""
    directions = np.asarray(directions, dtype=np.float64)
    c = np.cos(angle)
    s = np.sin(angle)
    x, y, z = directions[..., 0], directions[..., 1], directions[..., 2]
    return np.stack([x * c + z * s, y, -x * s + z * c], axis=-1)


def rotate_z(directions, angle) -> np.ndarray:
    """Rotate vectors about the z axis by ``angle`` (right-handed)."""
    directions = np.asarray(directions, dtype=np.float64)
    c = np.cos(angle)
    s = np.sin(angle)
    x, y, z = directions[..., 0], directions[..., 1], directions[..., 2]
    return np.stack([x * c - y * s, x * s + y * c, z], axis=-1)


def reflect(directions) -> np.ndarray:
    """Mirror directions about the surface normal (0, 0, 1)."""
    directions = np.asarray(directions, dtype=np.float64)
    return directions * np.array([-1.0, -1.0, 1.0])


def specular_to_xyz(in_theta, in_phi, spec_theta, spec_phi) -> Tuple[np.ndarray, np.ndarray]:
    """Convert specular-offset angles to (in_dir, out_dir).

    The specular frame is the z axis rotated about y by ``in_theta`` and
    about z by ``in_phi + pi``. Its z axis is the mirror direction and
    ``spec_phi`` = 0 or pi lie in the plane of incidence.
    """
    in_theta, in_phi, spec_theta, spec_phi = np.broadcast_arrays(
        *(np.asarray(a, dtype=np.float64) for a in (in_theta, in_phi, spec_theta, spec_phi))
    )
    in_dir = spherical_to_xyz(in_theta, in_phi)
    local = spherical_to_xyz(spec_theta, spec_phi)
    out_dir = rotate_z(rotate_y(local, in_theta), in_phi + PI)
    return in_dir, out_dir


def xyz_to_specular(in_dir, out_dir) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Convert (in_dir, out_dir) to (in_theta, in_phi, spec_theta, spec_phi)."""
    in_dir, out_dir = np.broadcast_arrays(np.asarray(in_dir, dtype=np.float64),
                                          np.asarray(out_dir, dtype=np.float64))
    in_theta, in_phi = xyz_to_spherical(in_dir)
    local = rotate_y(rotate_z(out_dir, -(in_phi + PI)), -in_theta)
    spec_theta, spec_phi = xyz_to_spherical(local)
    return in_theta, in_phi, spec_theta, spec_phi


def spherical_pair_to_xyz(in_theta, in_phi, out_theta, out_phi) -> Tuple[np.ndarray, np.ndarray]:
    """Convert (in_theta, in_phi, out_theta, out_phi) to (in_dir, out_dir)."""
    return spherical_to_xyz(in_theta, in_phi), spherical_to_xyz(out_theta, out_phi)


def xyz_to_spherical_pair(in_dir, out_dir) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Convert (in_dir, out_dir) to (in_theta, in_phi, out_theta, out_phi)."""
    in_theta, in_phi = xyz_to_spherical(in_dir)
    out_theta, out_phi = xyz_to_spherical(out_dir)
    return in_theta, in_phi, out_theta, out_phi


def half_difference_to_xyz(half_theta, half_phi, diff_theta, diff_phi) -> Tuple[np.ndarray, np.ndarray]:
    """Convert Rusinkiewicz half/difference angles to (in_dir, out_dir)."""
    half_theta, half_phi, diff_theta, diff_phi = np.broadcast_arrays(
        *(np.asarray(a, dtype=np.float64) for a in (half_theta, half_phi, diff_theta, diff_phi))
    )
    half = spherical_to_xyz(half_theta, half_phi)
    diff = spherical_to_xyz(diff_theta, diff_phi)
    in_dir = rotate_z(rotate_y(diff, half_theta), half_phi)
    cos_h = np.sum(in_dir * half, axis=-1, keepdims=True)
    out_dir = 2.0 * cos_h * half - in_dir
    return in_dir, normalize(out_dir)


def xyz_to_half_difference(in_dir, out_dir) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Convert (in_dir, out_dir) to (half_theta, half_phi, diff_theta, diff_phi)."""
    in_dir, out_dir = np.broadcast_arrays(np.asarray(in_dir, dtype=np.float64),
                                          np.asarray(out_dir, dtype=np.float64))
    half = in_dir + out_dir
    norm = np.linalg.norm(half, axis=-1, keepdims=True)
    # Opposite directions have no half vector; fall back to the normal
    half = np.where(norm > 1e-12, half / np.where(norm > 1e-12, norm, 1.0),
                    np.array([0.0, 0.0, 1.0]))
    half_theta, half_phi = xyz_to_spherical(half)
    diff = rotate_y(rotate_z(in_dir, -half_phi), -half_theta)
    diff_theta, diff_phi = xyz_to_spherical(diff)
    return half_theta, half_phi, diff_theta, diff_phi

"""
===============================================================================
SPATIAL TRANSFORMS
===============================================================================
3D spatial-transform math: vectors, Euler-angle and quaternion orientations,
and translation / rotation / scale transforms.

All types are immutable values. Angles are degrees on EulerRotation and
radians everywhere else; equality is always tolerance based.
===============================================================================
"""

from spatial_transforms.core.constants import (
    DEFAULT_TOLERANCE,
    SMALL_NUMBER,
    degrees_to_radians,
    radians_to_degrees,
)
from spatial_transforms.core.quaternion import Quaternion
from spatial_transforms.core.rotator import EulerRotation
from spatial_transforms.core.transform import DegenerateScaleError, Transform
from spatial_transforms.core.vector import Axis, Vector3

__all__ = [
    "Axis",
    "DEFAULT_TOLERANCE",
    "DegenerateScaleError",
    "EulerRotation",
    "Quaternion",
    "SMALL_NUMBER",
    "Transform",
    "Vector3",
    "degrees_to_radians",
    "radians_to_degrees",
]

__version__ = "0.1.0"

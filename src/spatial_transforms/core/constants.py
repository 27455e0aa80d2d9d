"""
===============================================================================
SPATIAL TRANSFORMS - Numerical Constants and Tolerances
===============================================================================
Central repository for the angle factors, thresholds and comparison
tolerances shared by the vector, rotator, quaternion and transform modules.

Angles are in radians at the quaternion / trigonometric boundary and in
degrees at the EulerRotation boundary. The two helpers below are the only
place the conversion factor is applied.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# COMPARISON TOLERANCES
# =============================================================================
DEFAULT_TOLERANCE = 1e-4               # Default for every equals() call
SMALL_NUMBER = 1e-8                    # Below this a length is treated as zero
KINDA_SMALL_NUMBER = 1e-4              # Looser "nearly zero" threshold

# =============================================================================
# ALGORITHM THRESHOLDS
# =============================================================================
THRESH_QUAT_NORMALIZED = 0.01          # |size^2 - 1| accepted as unit length
THRESH_VECTOR_NORMALIZED = 0.01        # Same, for direction vectors
SLERP_NLERP_THRESHOLD = 0.9995         # cos(angle) above which slerp uses nlerp
FIND_BETWEEN_THRESHOLD = 1e-6          # Relative W below which inputs are anti-parallel
GIMBAL_SINGULARITY_THRESHOLD = 1.0 - 1e-12  # |sin(pitch)| treated as a gimbal pole (~8e-5 deg)


def degrees_to_radians(degrees: float) -> float:
    """
    Convert an angle from degrees to radians.

    Args:
        degrees: Angle in degrees

    Returns:
        Angle in radians (degrees * pi / 180)
    """
    return degrees * DEG2RAD


def radians_to_degrees(radians: float) -> float:
    """
    Convert an angle from radians to degrees.

    Args:
        radians: Angle in radians

    Returns:
        Angle in degrees (radians * 180 / pi)
    """
    return radians * RAD2DEG


def clamp_axis(angle: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    angle = float(angle) % 360.0
    # Python's modulo can round a tiny negative input up to exactly 360.0
    if angle >= 360.0:
        angle -= 360.0
    return angle


def normalize_axis(angle: float) -> float:
    """
    Wrap an angle in degrees into (-180, 180].

    Args:
        angle: Angle in degrees, any range

    Returns:
        Equivalent angle in (-180, 180]
    """
    angle = clamp_axis(angle)
    if angle > 180.0:
        angle -= 360.0
    return angle

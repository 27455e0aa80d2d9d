"""
===============================================================================
SPATIAL TRANSFORMS - Euler-Angle Rotation
===============================================================================

EulerRotation stores an orientation as three angles in DEGREES:

    pitch  -- rotation about the right (Y) axis
    yaw    -- rotation about the up (Z) axis
    roll   -- rotation about the forward (X) axis

The angles are applied as intrinsic body rotations in the fixed order
yaw, then pitch, then roll. Equivalently, the rotation is the quaternion
product

    q = q_z(yaw) * q_y(pitch) * q_x(roll)

and every angle turns about its axis by the right-hand rule. With X forward
and Z up, a positive pitch therefore tips the forward vector DOWN.

EulerRotation is an input/display convenience. Everything that touches a
vector (rotate_vector, unrotate_vector, composition) goes through the
equivalent Quaternion; raw Euler triples are never chained.

Angles are not range-reduced on construction and + / - are plain
component-wise operations. Call normalized() for the canonical
(-180, 180] range.
===============================================================================
"""

from numbers import Real
from typing import Iterator, Sequence, Union

import numpy as np

from spatial_transforms.core.constants import (
    DEFAULT_TOLERANCE,
    DEG2RAD,
    KINDA_SMALL_NUMBER,
    RAD2DEG,
    clamp_axis,
    normalize_axis,
)
from spatial_transforms.core.quaternion import Quaternion
from spatial_transforms.core.vector import Vector3


class EulerRotation:
    """
    Immutable pitch / yaw / roll orientation in degrees.

    Parameters
    ----------
    pitch : float
        Rotation about the right (Y) axis, degrees.
    yaw : float
        Rotation about the up (Z) axis, degrees.
    roll : float
        Rotation about the forward (X) axis, degrees.

    Examples
    --------
    >>> EulerRotation(0.0, 90.0, 0.0).rotate_vector(Vector3.FORWARD).equals(Vector3.RIGHT)
    True
    """

    ZERO: 'EulerRotation'

    __array_ufunc__ = None

    def __init__(self, pitch: float = 0.0, yaw: float = 0.0, roll: float = 0.0) -> None:
        r = np.array([pitch, yaw, roll], dtype=np.float64)
        r.setflags(write=False)
        self._r = r

    @classmethod
    def _from_array(cls, arr: np.ndarray) -> 'EulerRotation':
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @classmethod
    def from_direction(cls, direction: Union[Vector3, Sequence[float], np.ndarray]) -> 'EulerRotation':
        """
        Orientation whose forward vector points along direction.

        Parameters
        ----------
        direction : Vector3 or array-like
            Direction to face; need not be unit length.

        Returns
        -------
        EulerRotation
            yaw   = atan2(y, x)
            pitch = atan2(-z, sqrt(x^2 + y^2))
            roll  = 0, since a direction alone cannot determine roll.
            The zero vector maps to the zero rotation.
        """
        d = Vector3.coerce(direction)
        yaw = np.arctan2(d.y, d.x) * RAD2DEG
        pitch = np.arctan2(-d.z, d.length_2d()) * RAD2DEG
        return cls(float(pitch), float(yaw), 0.0)

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def pitch(self) -> float:
        return float(self._r[0])

    @property
    def yaw(self) -> float:
        return float(self._r[1])

    @property
    def roll(self) -> float:
        return float(self._r[2])

    @property
    def components(self) -> np.ndarray:
        """Writable copy of [pitch, yaw, roll] in degrees."""
        return self._r.copy()

    def __iter__(self) -> Iterator[float]:
        return iter((self.pitch, self.yaw, self.roll))

    # =========================================================================
    # ARITHMETIC (component-wise, no wraparound)
    # =========================================================================

    def __add__(self, other: 'EulerRotation') -> 'EulerRotation':
        if isinstance(other, EulerRotation):
            return EulerRotation._from_array(self._r + other._r)
        return NotImplemented

    def __sub__(self, other: 'EulerRotation') -> 'EulerRotation':
        if isinstance(other, EulerRotation):
            return EulerRotation._from_array(self._r - other._r)
        return NotImplemented

    def __mul__(self, scale: Real) -> 'EulerRotation':
        if isinstance(scale, Real):
            return EulerRotation._from_array(self._r * float(scale))
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> 'EulerRotation':
        return EulerRotation._from_array(-self._r)

    # =========================================================================
    # RANGE REDUCTION
    # =========================================================================

    def normalized(self) -> 'EulerRotation':
        """Copy with every angle wrapped into (-180, 180]."""
        return EulerRotation(normalize_axis(self.pitch), normalize_axis(self.yaw),
                             normalize_axis(self.roll))

    def clamped(self) -> 'EulerRotation':
        """Copy with every angle wrapped into [0, 360)."""
        return EulerRotation(clamp_axis(self.pitch), clamp_axis(self.yaw),
                             clamp_axis(self.roll))

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def to_quaternion(self) -> Quaternion:
        """
        Equivalent unit quaternion.

        The closed form is obtained by multiplying the three single-axis
        quaternions

            q = q_z(yaw) * q_y(pitch) * q_x(roll)

        where each factor is [sin(a/2) * axis, cos(a/2)].

        References
        ----------
        Diebel, "Representing Attitude: Euler Angles, Unit Quaternions, and
        Rotation Vectors", Stanford, 2006, Eq. 290.
        """
        # Half-angles in radians; each trig function called once
        half = 0.5 * DEG2RAD
        c_roll = np.cos(self.roll * half)
        s_roll = np.sin(self.roll * half)
        c_pitch = np.cos(self.pitch * half)
        s_pitch = np.sin(self.pitch * half)
        c_yaw = np.cos(self.yaw * half)
        s_yaw = np.sin(self.yaw * half)

        x = s_roll * c_pitch * c_yaw - c_roll * s_pitch * s_yaw
        y = c_roll * s_pitch * c_yaw + s_roll * c_pitch * s_yaw
        z = c_roll * c_pitch * s_yaw - s_roll * s_pitch * c_yaw
        w = c_roll * c_pitch * c_yaw + s_roll * s_pitch * s_yaw

        return Quaternion(x, y, z, w, normalize=True)

    def quaternion(self) -> Quaternion:
        """Alias of to_quaternion()."""
        return self.to_quaternion()

    def rotate_vector(self, v: Union[Vector3, Sequence[float], np.ndarray]) -> Vector3:
        """Apply this rotation to a direction."""
        return self.to_quaternion().rotate_vector(v)

    def unrotate_vector(self, v: Union[Vector3, Sequence[float], np.ndarray]) -> Vector3:
        """Apply the inverse of this rotation to a direction."""
        return self.to_quaternion().unrotate_vector(v)

    def to_direction_vector(self) -> Vector3:
        """
        Forward (X) axis after rotation.

        Roll spins about the forward axis and so does not affect the result:

            (cos(pitch) * cos(yaw), cos(pitch) * sin(yaw), -sin(pitch))
        """
        pitch = self.pitch * DEG2RAD
        yaw = self.yaw * DEG2RAD
        cp = np.cos(pitch)
        return Vector3(cp * np.cos(yaw), cp * np.sin(yaw), -np.sin(pitch))

    def vector(self) -> Vector3:
        """Alias of to_direction_vector()."""
        return self.to_direction_vector()

    def inverse(self) -> 'EulerRotation':
        """Rotation that undoes this one, re-expressed as Euler angles."""
        return self.to_quaternion().inverse().to_euler_rotation()

    # =========================================================================
    # COMPARISON AND DISPLAY
    # =========================================================================

    def equals(self, other: 'EulerRotation', tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """
        Per-axis comparison modulo 360 degrees.

        Each difference is wrapped into (-180, 180] before the tolerance
        test, so 0 and 360 compare equal. Orientations that coincide only
        through gimbal ambiguity are NOT equal here; compare the
        quaternions for that.
        """
        diff = self._r - other._r
        return all(abs(normalize_axis(d)) <= tolerance for d in diff)

    def is_nearly_zero(self, tolerance: float = KINDA_SMALL_NUMBER) -> bool:
        return all(abs(normalize_axis(a)) <= tolerance for a in self._r)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EulerRotation):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"EulerRotation(pitch={self.pitch:+.6f}, yaw={self.yaw:+.6f}, "
                f"roll={self.roll:+.6f})")

    def __str__(self) -> str:
        return (f"Pitch={self.pitch:+7.2f} deg, Yaw={self.yaw:+7.2f} deg, "
                f"Roll={self.roll:+7.2f} deg")


EulerRotation.ZERO = EulerRotation(0.0, 0.0, 0.0)

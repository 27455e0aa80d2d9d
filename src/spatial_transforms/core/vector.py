"""
===============================================================================
SPATIAL TRANSFORMS - Vector3
===============================================================================

Immutable 3-component real vector used for points, directions and per-axis
scale factors.

Axis Convention
---------------
    X = forward,  Y = right,  Z = up

The cross product follows the right-hand rule, so

    cross(FORWARD, RIGHT) = UP

Every arithmetic operation returns a new Vector3; the backing array is
read-only, so instances can be shared freely between threads and between
Transforms.

Degenerate Input Policy
-----------------------
get_safe_normal() of a vector shorter than SMALL_NUMBER returns the zero
vector instead of dividing by a near-zero length. No method in this module
is the origin of a NaN for finite inputs.
===============================================================================
"""

from enum import Enum
from numbers import Real
from typing import TYPE_CHECKING, Iterator, Optional, Sequence, Union

import numpy as np

from spatial_transforms.core.constants import (
    DEFAULT_TOLERANCE,
    KINDA_SMALL_NUMBER,
    SMALL_NUMBER,
    THRESH_VECTOR_NORMALIZED,
)

if TYPE_CHECKING:
    from spatial_transforms.core.quaternion import Quaternion
    from spatial_transforms.core.rotator import EulerRotation


class Axis(Enum):
    """Local coordinate axis of a frame."""
    X = 0
    Y = 1
    Z = 2

    @classmethod
    def coerce(cls, value: Union['Axis', str]) -> 'Axis':
        """
        Accept an Axis member or its name ('x', 'Y', ...).

        Raises
        ------
        ValueError
            If value does not name one of the three axes.
        """
        if isinstance(value, Axis):
            return value
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        raise ValueError(f"Unknown axis: {value!r}. Valid: ['X', 'Y', 'Z']")


class Vector3:
    """
    Immutable 3D vector.

    Parameters
    ----------
    x : float
        Forward component, or the value of all three components when y and
        z are omitted (``Vector3(5.0) == Vector3(5.0, 5.0, 5.0)``).
    y : float, optional
        Right component.
    z : float, optional
        Up component.

    Examples
    --------
    >>> Vector3(1.0, 2.0, 3.0) + Vector3(4.0, 5.0, 6.0)
    Vector3(x=+5.000000, y=+7.000000, z=+9.000000)
    >>> Vector3.cross(Vector3.FORWARD, Vector3.RIGHT).equals(Vector3.UP)
    True
    """

    # Assigned after the class body
    ZERO: 'Vector3'
    ONE: 'Vector3'
    FORWARD: 'Vector3'
    BACKWARD: 'Vector3'
    RIGHT: 'Vector3'
    LEFT: 'Vector3'
    UP: 'Vector3'
    DOWN: 'Vector3'
    X_AXIS: 'Vector3'
    Y_AXIS: 'Vector3'
    Z_AXIS: 'Vector3'

    # Keep numpy scalars from treating a Vector3 as a sequence in "s * v"
    __array_ufunc__ = None

    def __init__(self, x: float = 0.0, y: Optional[float] = None,
                 z: Optional[float] = None) -> None:
        if y is None and z is None:
            y = z = x
        elif y is None or z is None:
            raise ValueError(
                "Vector3 takes either one uniform value or all three "
                f"components, got x={x!r}, y={y!r}, z={z!r}"
            )

        v = np.array([x, y, z], dtype=np.float64)
        v.setflags(write=False)
        self._v = v

    @classmethod
    def _from_array(cls, arr: np.ndarray) -> 'Vector3':
        """Wrap a length-3 array without re-validating the arguments."""
        vec = cls.__new__(cls)
        v = np.array(arr, dtype=np.float64)
        v.setflags(write=False)
        vec._v = v
        return vec

    @classmethod
    def coerce(cls, value: Union['Vector3', Sequence[float], np.ndarray]) -> 'Vector3':
        """
        Convert a Vector3 or any length-3 array-like into a Vector3.

        Raises
        ------
        ValueError
            If value does not have shape (3,).
        """
        if isinstance(value, Vector3):
            return value
        arr = np.asarray(value, dtype=np.float64)
        if arr.shape != (3,):
            raise ValueError(f"Expected shape (3,), got {arr.shape}")
        return cls._from_array(arr)

    @classmethod
    def unit_axis(cls, axis: Union[Axis, str]) -> 'Vector3':
        """Unit vector along the given local axis."""
        return (cls.X_AXIS, cls.Y_AXIS, cls.Z_AXIS)[Axis.coerce(axis).value]

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    @property
    def components(self) -> np.ndarray:
        """Writable copy of [x, y, z]."""
        return self._v.copy()

    def to_array(self) -> np.ndarray:
        return self._v.copy()

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> float:
        return float(self._v[index])

    def __len__(self) -> int:
        return 3

    # =========================================================================
    # ARITHMETIC
    # =========================================================================

    def __add__(self, other: 'Vector3') -> 'Vector3':
        if isinstance(other, Vector3):
            return Vector3._from_array(self._v + other._v)
        return NotImplemented

    def __sub__(self, other: 'Vector3') -> 'Vector3':
        if isinstance(other, Vector3):
            return Vector3._from_array(self._v - other._v)
        return NotImplemented

    def __mul__(self, other: Union['Vector3', Real]) -> 'Vector3':
        """
        Multiplication operator.

        - Vector3 * Vector3 -> component-wise product (used for scaling)
        - Vector3 * scalar  -> uniform scaling
        """
        if isinstance(other, Vector3):
            return Vector3._from_array(self._v * other._v)
        if isinstance(other, Real):
            return Vector3._from_array(self._v * float(other))
        return NotImplemented

    def __rmul__(self, other: Real) -> 'Vector3':
        if isinstance(other, Real):
            return Vector3._from_array(self._v * float(other))
        return NotImplemented

    def __truediv__(self, other: Union['Vector3', Real]) -> 'Vector3':
        """Component-wise or scalar division. Division by zero is the caller's concern."""
        if isinstance(other, Vector3):
            return Vector3._from_array(self._v / other._v)
        if isinstance(other, Real):
            return Vector3._from_array(self._v / float(other))
        return NotImplemented

    def __neg__(self) -> 'Vector3':
        return Vector3._from_array(-self._v)

    # =========================================================================
    # PRODUCTS AND MEASURES
    # =========================================================================

    @staticmethod
    def dot(a: 'Vector3', b: 'Vector3') -> float:
        """Scalar (inner) product a . b."""
        return float(np.dot(a._v, b._v))

    @staticmethod
    def cross(a: 'Vector3', b: 'Vector3') -> 'Vector3':
        """
        Right-handed cross product a x b.

        With X forward, Y right, Z up: cross(FORWARD, RIGHT) == UP.
        """
        return Vector3._from_array(np.cross(a._v, b._v))

    def length(self) -> float:
        """Euclidean length sqrt(x^2 + y^2 + z^2)."""
        return float(np.linalg.norm(self._v))

    def length_squared(self) -> float:
        return float(np.dot(self._v, self._v))

    def length_2d(self) -> float:
        """Length of the horizontal (X, Y) projection."""
        return float(np.hypot(self._v[0], self._v[1]))

    @staticmethod
    def distance(a: 'Vector3', b: 'Vector3') -> float:
        """Euclidean distance between two points."""
        return (b - a).length()

    @staticmethod
    def dist_squared(a: 'Vector3', b: 'Vector3') -> float:
        return (b - a).length_squared()

    def get_safe_normal(self, tolerance: float = SMALL_NUMBER) -> 'Vector3':
        """
        Unit vector in the direction of this vector.

        Parameters
        ----------
        tolerance : float, optional
            Length below which the vector is considered degenerate.

        Returns
        -------
        Vector3
            self / length, or the zero vector when length < tolerance.
            Never contains NaN or Inf for finite input.
        """
        n = self.length()
        if n < tolerance:
            return Vector3.ZERO
        return Vector3._from_array(self._v / n)

    def is_nearly_zero(self, tolerance: float = KINDA_SMALL_NUMBER) -> bool:
        """True when every component is within tolerance of zero."""
        return bool(np.all(np.abs(self._v) <= tolerance))

    def is_normalized(self) -> bool:
        return abs(1.0 - self.length_squared()) < THRESH_VECTOR_NORMALIZED

    @staticmethod
    def lerp(a: 'Vector3', b: 'Vector3', t: float) -> 'Vector3':
        """
        Linear interpolation a + (b - a) * t.

        t is not clamped: values outside [0, 1] extrapolate along the line.
        """
        return Vector3._from_array(a._v + (b._v - a._v) * t)

    # =========================================================================
    # ORIENTATION QUERIES
    # =========================================================================

    def rotation(self) -> 'EulerRotation':
        """EulerRotation whose forward vector points along this direction (roll = 0)."""
        from spatial_transforms.core.rotator import EulerRotation
        return EulerRotation.from_direction(self)

    def to_orientation_quat(self) -> 'Quaternion':
        """Quaternion whose forward vector points along this direction (roll = 0)."""
        return self.rotation().to_quaternion()

    # =========================================================================
    # COMPARISON AND DISPLAY
    # =========================================================================

    def equals(self, other: 'Vector3', tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """True when every component differs by at most tolerance."""
        return bool(np.all(np.abs(self._v - other._v) <= tolerance))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Vector3(x={self.x:+.6f}, y={self.y:+.6f}, z={self.z:+.6f})"

    def __str__(self) -> str:
        return f"({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"


# =============================================================================
# NAMED CONSTANTS
# =============================================================================
Vector3.ZERO = Vector3(0.0, 0.0, 0.0)
Vector3.ONE = Vector3(1.0, 1.0, 1.0)
Vector3.FORWARD = Vector3(1.0, 0.0, 0.0)
Vector3.BACKWARD = Vector3(-1.0, 0.0, 0.0)
Vector3.RIGHT = Vector3(0.0, 1.0, 0.0)
Vector3.LEFT = Vector3(0.0, -1.0, 0.0)
Vector3.UP = Vector3(0.0, 0.0, 1.0)
Vector3.DOWN = Vector3(0.0, 0.0, -1.0)
Vector3.X_AXIS = Vector3.FORWARD
Vector3.Y_AXIS = Vector3.RIGHT
Vector3.Z_AXIS = Vector3.UP

"""
===============================================================================
SPATIAL TRANSFORMS - Quaternion Mathematics
===============================================================================

Unit quaternions are the canonical rotation representation of this package.
EulerRotation converts to a Quaternion before doing anything with a vector,
and Transform stores its orientation as a Quaternion. Quaternions avoid the
gimbal-lock singularity of Euler angles and compose with a single product.

Convention
----------
Components are stored vector-first:

    q = [x, y, z, w] = x*i + y*j + z*k + w

where w is the scalar (real) part. A rotation by angle theta about the unit
axis n is

    q = [n * sin(theta/2), cos(theta/2)]

and rotates a vector through the sandwich product

    v' = q * v * q_conjugate

Composition Order
-----------------
The product q1 * q2 (Hamilton product) represents "apply q2 first, then q1".
Quaternion products always read this way. Transform composition
(child * parent) reads left to right instead; see transform.py.

    (q1 * q2).rotate_vector(v) == q1.rotate_vector(q2.rotate_vector(v))

Euler Angle Convention
----------------------
EulerRotation (pitch, yaw, roll, degrees) maps to the product

    q = q_z(yaw) * q_y(pitch) * q_x(roll)

i.e. roll about the forward axis is applied first, then pitch about the
right axis, then yaw about the up axis. Read as intrinsic rotations of a
body this is: yaw, then pitch, then roll.

Degenerate Input Policy
-----------------------
- Normalizing a (near-)zero quaternion returns the identity.
- A zero-length rotation axis yields the identity.
- find_between_vectors() with anti-parallel inputs returns a 180-degree
  rotation about an axis perpendicular to the first input.
- Euler extraction at a gimbal pole returns pitch = +/-90, roll = 0 and
  folds the lost degree of freedom into yaw.

References
----------
    [1] Markley & Crassidis, "Fundamentals of Spacecraft Attitude
        Determination and Control", Springer, 2014.
    [2] Shoemake, "Animating Rotation with Quaternion Curves",
        SIGGRAPH, 1985.
    [3] Diebel, "Representing Attitude: Euler Angles, Unit Quaternions, and
        Rotation Vectors", Stanford, 2006.

===============================================================================
"""

import logging
from numbers import Real
from typing import TYPE_CHECKING, Optional, Tuple, Union

import numpy as np

from spatial_transforms.core.constants import (
    DEFAULT_TOLERANCE,
    FIND_BETWEEN_THRESHOLD,
    GIMBAL_SINGULARITY_THRESHOLD,
    RAD2DEG,
    SLERP_NLERP_THRESHOLD,
    SMALL_NUMBER,
    THRESH_QUAT_NORMALIZED,
    TWO_PI,
)
from spatial_transforms.core.vector import Axis, Vector3

if TYPE_CHECKING:
    from spatial_transforms.core.rotator import EulerRotation

logger = logging.getLogger(__name__)

VectorLike = Union[Vector3, Tuple[float, float, float], np.ndarray]


class Quaternion:
    """
    Immutable quaternion for 3D rotation representation.

    A unit quaternion q = [x, y, z, w] parameterizes a rotation by angle
    theta about unit axis n as:

        q = [sin(theta/2) * n_x, sin(theta/2) * n_y, sin(theta/2) * n_z, cos(theta/2)]

    Because of the half angle, multiplying two unit quaternions composes
    their rotations, and q and -q describe the same rotation.

    Attributes
    ----------
    x, y, z : float
        Vector part, stored first.
    w : float
        Scalar part, stored last.

    Examples
    --------
    >>> q = Quaternion.from_axis_angle(Vector3.UP, np.pi / 2)  # 90-deg yaw
    >>> q.rotate_vector(Vector3.FORWARD).equals(Vector3.RIGHT)
    True
    """

    IDENTITY: 'Quaternion'

    __array_ufunc__ = None

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0,
                 w: float = 1.0, normalize: bool = False) -> None:
        """
        Build a quaternion from its components, vector part first.

        Parameters
        ----------
        x, y, z : float
            Vector part (n * sin(theta/2) for a rotation by theta about n).
        w : float
            Scalar part (cos(theta/2)).
        normalize : bool, optional
            Scale the result to unit length; a zero quaternion becomes the
            identity. Otherwise the components are kept as given.
        """
        q = np.array([x, y, z, w], dtype=np.float64)
        if normalize:
            q = self._normalized_array(q)
        q.setflags(write=False)
        self._q = q

    @classmethod
    def _from_array(cls, arr: np.ndarray) -> 'Quaternion':
        quat = cls.__new__(cls)
        q = np.array(arr, dtype=np.float64)
        q.setflags(write=False)
        quat._q = q
        return quat

    @staticmethod
    def _normalized_array(q: np.ndarray) -> np.ndarray:
        n = np.linalg.norm(q)
        if n < SMALL_NUMBER:
            logger.debug("Normalizing near-zero quaternion (norm = %.2e); "
                         "substituting identity", n)
            return np.array([0.0, 0.0, 0.0, 1.0])
        return q / n

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def x(self) -> float:
        return float(self._q[0])

    @property
    def y(self) -> float:
        return float(self._q[1])

    @property
    def z(self) -> float:
        return float(self._q[2])

    @property
    def w(self) -> float:
        """Scalar part; cos(theta/2) for a rotation by theta."""
        return float(self._q[3])

    @property
    def vector(self) -> Vector3:
        """Vector (imaginary) part [x, y, z]."""
        return Vector3._from_array(self._q[:3])

    @property
    def components(self) -> np.ndarray:
        """Writable copy of [x, y, z, w]."""
        return self._q.copy()

    def to_array(self) -> np.ndarray:
        return self._q.copy()

    def size(self) -> float:
        """L2 norm sqrt(x^2 + y^2 + z^2 + w^2); 1.0 for a rotation quaternion."""
        return float(np.sqrt(self.size_squared()))

    def size_squared(self) -> float:
        return float(np.dot(self._q, self._q))

    # =========================================================================
    # STATIC FACTORY METHODS
    # =========================================================================

    @staticmethod
    def identity() -> 'Quaternion':
        """The no-rotation quaternion [0, 0, 0, 1]."""
        return Quaternion.IDENTITY

    @staticmethod
    def from_axis_angle(axis: VectorLike, angle: float) -> 'Quaternion':
        """
        Rotation by angle about axis (right-hand rule):

            q = [sin(theta/2) * n, cos(theta/2)]

        Parameters
        ----------
        axis : Vector3 or array-like
            Rotation axis. Normalized internally.
        angle : float
            Rotation angle in radians.

        Returns
        -------
        Quaternion
            Unit quaternion for the rotation. A zero-length axis yields the
            identity.
        """
        n = Vector3.coerce(axis).get_safe_normal()
        if n.is_nearly_zero(0.0):
            logger.debug("Zero-length rotation axis; returning identity")
            return Quaternion.IDENTITY

        half_angle = 0.5 * angle
        s = np.sin(half_angle)
        return Quaternion(n.x * s, n.y * s, n.z * s, np.cos(half_angle))

    @staticmethod
    def from_euler(rotator: 'EulerRotation') -> 'Quaternion':
        """Quaternion equivalent to an EulerRotation (see EulerRotation.to_quaternion)."""
        return rotator.to_quaternion()

    @staticmethod
    def from_rotation_vector(rot_vec: VectorLike) -> 'Quaternion':
        """
        Inverse of to_rotation_vector().

        The direction of rot_vec is the axis and its length the angle in
        radians. Lengths below SMALL_NUMBER give the identity.
        """
        rot_vec = Vector3.coerce(rot_vec)
        angle = rot_vec.length()

        if angle < SMALL_NUMBER:
            return Quaternion.IDENTITY

        return Quaternion.from_axis_angle(rot_vec / angle, angle)

    @staticmethod
    def find_between_vectors(a: VectorLike, b: VectorLike) -> 'Quaternion':
        """
        Shortest-arc rotation taking direction a onto direction b.

        The inputs do not need to be unit length. With
        W = |a||b| + a . b, the unnormalized result is [a x b, W], which
        is the half-angle quaternion of the rotation in the plane spanned
        by a and b once normalized.

        Parameters
        ----------
        a : Vector3 or array-like
            Source direction.
        b : Vector3 or array-like
            Target direction.

        Returns
        -------
        Quaternion
            Unit quaternion with q.rotate_vector(a) parallel to b.

        Notes
        -----
        - Parallel inputs give a x b = 0 and W > 0, i.e. the identity.
        - Anti-parallel inputs drive W to zero and the plane is undefined.
          We then return a 180-degree rotation about an axis perpendicular
          to a, built by dropping the smaller of the x and y components of a
          so the axis never degenerates.
        - A zero-length input normalizes to the identity.
        """
        a = Vector3.coerce(a)
        b = Vector3.coerce(b)
        norm_ab = np.sqrt(a.length_squared() * b.length_squared())
        w = norm_ab + Vector3.dot(a, b)

        if w >= FIND_BETWEEN_THRESHOLD * norm_ab:
            c = Vector3.cross(a, b)
            q = np.array([c.x, c.y, c.z, w])
        else:
            logger.debug("find_between_vectors: anti-parallel inputs, "
                         "using 180-degree rotation about a perpendicular axis")
            if abs(a.x) > abs(a.y):
                q = np.array([-a.z, 0.0, a.x, 0.0])
            else:
                q = np.array([0.0, -a.z, a.y, 0.0])

        return Quaternion._from_array(Quaternion._normalized_array(q))

    @staticmethod
    def find_between_normals(a: VectorLike, b: VectorLike) -> 'Quaternion':
        """find_between_vectors() for inputs already known to be unit length."""
        return Quaternion.find_between_vectors(a, b)

    @staticmethod
    def random(rng: Optional[np.random.Generator] = None) -> 'Quaternion':
        """
        Rotation drawn uniformly from SO(3).

        Three uniform samples are mapped through Shoemake's subgroup
        construction. Normalizing a Gaussian or box-uniform 4-vector would
        not give the same distribution.

        Parameters
        ----------
        rng : numpy.random.Generator, optional
            Source of randomness; a fresh default generator when omitted.

        References
        ----------
        Shoemake, "Uniform Random Rotations", Graphics Gems III, 1992.
        """
        if rng is None:
            rng = np.random.default_rng()
        u0, u1, u2 = rng.random(3)
        r1 = np.sqrt(1.0 - u0)
        r2 = np.sqrt(u0)
        theta1 = TWO_PI * u1
        theta2 = TWO_PI * u2

        return Quaternion(r1 * np.cos(theta1), r2 * np.sin(theta2),
                          r2 * np.cos(theta2), r1 * np.sin(theta1), normalize=True)

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def conjugate(self) -> 'Quaternion':
        """[-x, -y, -z, w]; the reverse rotation for a unit quaternion."""
        return Quaternion(-self.x, -self.y, -self.z, self.w)

    def inverse(self) -> 'Quaternion':
        """
        Multiplicative inverse conjugate / |q|^2.

        Equal to the conjugate for unit input. A zero quaternion has no
        inverse; the identity is returned for it.
        """
        norm_sq = self.size_squared()
        if norm_sq < SMALL_NUMBER:
            return Quaternion.IDENTITY
        conj = np.array([-self.x, -self.y, -self.z, self.w])
        return Quaternion._from_array(conj / norm_sq)

    def get_normalized(self) -> 'Quaternion':
        """
        Unit-length copy.

        Long chains of products drift off the unit sphere through rounding;
        this pulls the result back. A (near-)zero quaternion normalizes to
        the identity.
        """
        return Quaternion._from_array(self._normalized_array(self._q))

    def is_normalized(self, tolerance: float = THRESH_QUAT_NORMALIZED) -> bool:
        """True when |size^2 - 1| < tolerance."""
        return abs(1.0 - self.size_squared()) < tolerance

    def is_identity(self, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        return self.equals(Quaternion.IDENTITY, tolerance)

    @staticmethod
    def dot(a: 'Quaternion', b: 'Quaternion') -> float:
        """4D inner product a . b = cos(half the angle between them) for unit inputs."""
        return float(np.dot(a._q, b._q))

    def multiply(self, other: 'Quaternion') -> 'Quaternion':
        """
        Hamilton product self * other.

        The result rotates a vector by other first and then by self, so the
        product does not commute. In vector / scalar form, with
        q = [u, w]:

            w  = w1 * w2 - u1 . u2
            u  = w1 * u2 + w2 * u1 + u1 x u2

        Unit inputs give a unit result up to rounding; nothing is
        renormalized here.
        """
        u1, w1 = self._q[:3], self._q[3]
        u2, w2 = other._q[:3], other._q[3]

        result = np.empty(4)
        result[:3] = w1 * u2 + w2 * u1 + np.cross(u1, u2)
        result[3] = w1 * w2 - np.dot(u1, u2)
        return Quaternion._from_array(result)

    # =========================================================================
    # ROTATION OPERATIONS
    # =========================================================================

    def rotate_vector(self, v: VectorLike) -> Vector3:
        """
        Rotate a vector by this (unit) quaternion.

        The sandwich product q * [v, 0] * q_conjugate expands to the
        Rodrigues form, which needs two cross products and no full
        quaternion products:

            t  = 2 * (u x v)
            v' = v + w*t + u x t

        with u the vector part of q.

        Parameters
        ----------
        v : Vector3 or array-like
            Direction to rotate.

        Returns
        -------
        Vector3
            Rotated vector.

        References
        ----------
        Markley & Crassidis (2014), Eq. 2.89.
        """
        return self._rodrigues(self._q[:3], Vector3.coerce(v)._v)

    def unrotate_vector(self, v: VectorLike) -> Vector3:
        """Rotate a vector by the inverse of this (unit) quaternion."""
        return self._rodrigues(-self._q[:3], Vector3.coerce(v)._v)

    def _rodrigues(self, u: np.ndarray, v: np.ndarray) -> Vector3:
        t = 2.0 * np.cross(u, v)
        return Vector3._from_array(v + self._q[3] * t + np.cross(u, t))

    def get_axis_x(self) -> Vector3:
        """Local X (forward) axis in the rotated frame."""
        return self.rotate_vector(Vector3.X_AXIS)

    def get_axis_y(self) -> Vector3:
        """Local Y (right) axis in the rotated frame."""
        return self.rotate_vector(Vector3.Y_AXIS)

    def get_axis_z(self) -> Vector3:
        """Local Z (up) axis in the rotated frame."""
        return self.rotate_vector(Vector3.Z_AXIS)

    def get_forward_vector(self) -> Vector3:
        return self.get_axis_x()

    def get_right_vector(self) -> Vector3:
        return self.get_axis_y()

    def get_up_vector(self) -> Vector3:
        return self.get_axis_z()

    def get_axis(self, axis: Union[Axis, str]) -> Vector3:
        return self.rotate_vector(Vector3.unit_axis(axis))

    # =========================================================================
    # CONVERSION METHODS
    # =========================================================================

    def get_angle(self) -> float:
        """Rotation angle 2 * arccos(|w|), in radians in [0, pi]."""
        # |w| can exceed 1 by rounding
        return float(2.0 * np.arccos(min(abs(self.w), 1.0)))

    def get_rotation_axis(self) -> Vector3:
        """
        Unit rotation axis, oriented to match get_angle().

        Returns
        -------
        Vector3
            Unit axis n = vector / |vector|, flipped when w < 0 so that the
            pair (axis, get_angle()) reproduces this rotation. The axis is
            undefined for the identity; X is returned by convention.
        """
        vec = self._q[:3]
        vec_len = float(np.linalg.norm(vec))

        if vec_len < SMALL_NUMBER:
            return Vector3.X_AXIS

        if self.w < 0.0:
            vec = -vec
        return Vector3._from_array(vec / vec_len)

    def to_axis_angle(self) -> Tuple[Vector3, float]:
        """(axis, angle) with angle in radians in [0, pi]."""
        return (self.get_rotation_axis(), self.get_angle())

    def to_rotation_vector(self) -> Vector3:
        """
        Rotation vector angle * axis (radians).

        This is the logarithmic map from SO(3) to its Lie algebra so(3).
        """
        return self.get_rotation_axis() * self.get_angle()

    def to_euler_rotation(self) -> 'EulerRotation':
        """
        Convert to an EulerRotation (pitch, yaw, roll in degrees).

        Away from the poles the extraction is the standard 3-2-1 result:

            roll  = atan2(2*(w*x + y*z), 1 - 2*(x^2 + y^2))
            pitch = arcsin(2*(w*y - z*x))
            yaw   = atan2(2*(w*z + x*y), 1 - 2*(y^2 + z^2))

        Returns
        -------
        EulerRotation
            pitch in [-90, 90], yaw and roll in [-180, 180].

        Notes
        -----
        Gimbal lock occurs at pitch = +/-90 degrees: roll and yaw then turn
        about the same world axis and only their difference (pitch = +90)
        or sum (pitch = -90) is observable. When |sin(pitch)| exceeds
        GIMBAL_SINGULARITY_THRESHOLD we report pitch = +/-90, roll = 0 and
        the combined angle as yaw:

            yaw = atan2(2*(w*z - x*y), 1 - 2*(x^2 + z^2))

        That triple reproduces the same orientation and never involves a
        division, so no NaN can appear.
        """
        from spatial_transforms.core.rotator import EulerRotation

        x, y, z, w = self._q

        sin_pitch = 2.0 * (w * y - z * x)

        if abs(sin_pitch) > GIMBAL_SINGULARITY_THRESHOLD:
            logger.debug("Euler extraction at gimbal pole (sin(pitch) = %.8f)", sin_pitch)
            pitch = np.copysign(90.0, sin_pitch)
            yaw = np.arctan2(2.0 * (w * z - x * y), 1.0 - 2.0 * (x * x + z * z))
            return EulerRotation(float(pitch), float(yaw * RAD2DEG), 0.0)

        roll = np.arctan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
        pitch = np.arcsin(np.clip(sin_pitch, -1.0, 1.0))
        yaw = np.arctan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))

        return EulerRotation(float(pitch * RAD2DEG), float(yaw * RAD2DEG),
                             float(roll * RAD2DEG))

    def rotator(self) -> 'EulerRotation':
        """Alias of to_euler_rotation()."""
        return self.to_euler_rotation()

    # =========================================================================
    # ANGULAR MEASURES
    # =========================================================================

    def angular_distance(self, other: 'Quaternion') -> float:
        """
        Angle of the rotation that takes this orientation onto other.

        Equal to the rotation angle of self.inverse() * other:

            angle = 2 * arccos(|q1 . q2|)

        The absolute value makes q and -q the same point.

        Returns
        -------
        float
            Unsigned angle in radians, in [0, pi].
        """
        cos_half = min(abs(Quaternion.dot(self, other)), 1.0)
        return float(2.0 * np.arccos(cos_half))

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    @staticmethod
    def slerp(start: 'Quaternion', end: 'Quaternion', alpha: float) -> 'Quaternion':
        """
        Spherical linear interpolation from start to end.

        Moves along the great circle through both quaternions on S^3 at
        constant angular rate:

            slerp(q1, q2, t) = (sin((1 - t) * omega) * q1 + sin(t * omega) * q2)
                               / sin(omega),    cos(omega) = q1 . q2

        Parameters
        ----------
        start : Quaternion
            Orientation at alpha = 0.
        end : Quaternion
            Orientation at alpha = 1.
        alpha : float
            Interpolation parameter. Values outside [0, 1] extrapolate
            along the same great circle.

        Returns
        -------
        Quaternion
            Normalized interpolated quaternion.

        Notes
        -----
        - end is negated when start . end < 0, which selects the shorter
          of the two arcs.
        - When cos(omega) > SLERP_NLERP_THRESHOLD the sine terms approach
          0 / 0, so normalized linear interpolation (NLERP) is used instead.
        """
        cos_omega = Quaternion.dot(start, end)

        end_q = end._q
        if cos_omega < 0.0:
            end_q = -end_q
            cos_omega = -cos_omega

        if cos_omega > SLERP_NLERP_THRESHOLD:
            blended = start._q + alpha * (end_q - start._q)
        else:
            omega = np.arccos(cos_omega)
            sin_omega = np.sin(omega)
            blended = (np.sin((1.0 - alpha) * omega) * start._q
                       + np.sin(alpha * omega) * end_q) / sin_omega

        return Quaternion._from_array(Quaternion._normalized_array(blended))

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __mul__(self, other: Union['Quaternion', Real]) -> 'Quaternion':
        """
        ``q1 * q2`` composes rotations (q2 applied first). ``q * s``
        scales every component and gives a non-unit quaternion.
        """
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if isinstance(other, Real):
            return Quaternion._from_array(self._q * float(other))
        return NotImplemented

    def __rmul__(self, other: Real) -> 'Quaternion':
        if isinstance(other, Real):
            return Quaternion._from_array(self._q * float(other))
        return NotImplemented

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        """Component-wise sum. Not a rotation operation; not normalized."""
        if isinstance(other, Quaternion):
            return Quaternion._from_array(self._q + other._q)
        return NotImplemented

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return Quaternion._from_array(self._q - other._q)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        # Same rotation, opposite hemisphere
        return Quaternion._from_array(-self._q)

    def equals(self, other: 'Quaternion', tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """
        Tolerance-based comparison.

        Two quaternions are considered equal if every component of q1 - q2,
        or every component of q1 + q2, is within tolerance. The second
        test accounts for q and -q describing the same rotation.
        """
        same = np.all(np.abs(self._q - other._q) <= tolerance)
        flipped = np.all(np.abs(self._q + other._q) <= tolerance)
        return bool(same or flipped)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Quaternion(x={self.x:+.8f}, y={self.y:+.8f}, "
                f"z={self.z:+.8f}, w={self.w:+.8f})")

    def __str__(self) -> str:
        """Components plus the rotation angle in degrees."""
        angle_deg = self.get_angle() * RAD2DEG
        return (f"[{self.x:+.6f}, {self.y:+.6f}, {self.z:+.6f}, "
                f"{self.w:+.6f}] (rot={angle_deg:.2f} deg)")


Quaternion.IDENTITY = Quaternion(0.0, 0.0, 0.0, 1.0)

"""
===============================================================================
SPATIAL TRANSFORMS - Translation / Rotation / Scale Transform
===============================================================================

A Transform maps coordinates from a local frame into its parent frame by
applying, in order:

    1. scale        (component-wise, may be non-uniform)
    2. rotation     (unit Quaternion)
    3. translation

    p_parent = rotation.rotate_vector(p_local * scale) + translation

Composition
-----------
``child * parent`` yields the transform that maps child-local coordinates
straight into the parent's parent frame (apply child, then parent):

    scale       = child.scale * parent.scale
    rotation    = parent.rotation * child.rotation
    translation = parent.rotation.rotate_vector(child.translation * parent.scale)
                  + parent.translation

Quaternion products apply the right operand first, while Transform
products apply the left operand (the child) first. Hence
(A * B).rotation == B.rotation * A.rotation.

A parent scale that is non-uniform cannot, in general, be pushed through a
child rotation and still be expressed as a per-axis scale (the exact
result would contain shear). Like other TRS libraries we keep the
component-wise product above; it is exact whenever the parent scale is
uniform or the child rotation keeps the coordinate axes aligned.

Zero Scale Policy
-----------------
A scale component whose magnitude is at most SMALL_NUMBER has no inverse.
inverse(), get_relative_transform() and the inverse_transform_* methods
substitute a reciprocal of 0 for such a component (the "safe reciprocal"):
the collapsed axis stays collapsed instead of becoming Inf/NaN. inverse()
and get_relative_transform() log a warning when this happens and raise
DegenerateScaleError instead when called with strict=True.
===============================================================================
"""

import logging
from numbers import Real
from typing import Optional, Sequence, Union

import numpy as np

from spatial_transforms.core.constants import DEFAULT_TOLERANCE, SMALL_NUMBER
from spatial_transforms.core.quaternion import Quaternion
from spatial_transforms.core.rotator import EulerRotation
from spatial_transforms.core.vector import Axis, Vector3

logger = logging.getLogger(__name__)

VectorLike = Union[Vector3, Sequence[float], np.ndarray]


class DegenerateScaleError(ValueError):
    """Raised by strict inversion when a scale component is (nearly) zero."""


def _safe_scale_reciprocal(scale: Vector3, tolerance: float = SMALL_NUMBER) -> Vector3:
    """1 / scale per component, with 0 for components within tolerance of zero."""
    s = scale.to_array()
    degenerate = np.abs(s) <= tolerance
    recip = np.zeros(3)
    recip[~degenerate] = 1.0 / s[~degenerate]
    return Vector3._from_array(recip)


def _has_degenerate_scale(scale: Vector3, tolerance: float = SMALL_NUMBER) -> bool:
    return bool(np.any(np.abs(scale.to_array()) <= tolerance))


class Transform:
    """
    Immutable translation + rotation + scale.

    Parameters
    ----------
    translation : Vector3 or array-like, optional
        Origin of the local frame in the parent frame. Defaults to zero.
    rotation : Quaternion or EulerRotation, optional
        Orientation of the local frame. Defaults to the identity. An
        EulerRotation is converted to its Quaternion, and the result is
        normalized so a non-unit Quaternion never scales points.
    scale : Vector3, array-like or float, optional
        Per-axis scale of the local frame. Defaults to (1, 1, 1). A single
        number means uniform scale.

    Examples
    --------
    >>> t = Transform(translation=Vector3(100.0, 0.0, 0.0),
    ...               rotation=EulerRotation(0.0, 90.0, 0.0),
    ...               scale=Vector3(2.0))
    >>> t.transform_position(Vector3(10.0, 0.0, 0.0)).equals(Vector3(100.0, 20.0, 0.0))
    True
    """

    IDENTITY: 'Transform'

    def __init__(self, translation: Optional[VectorLike] = None,
                 rotation: Optional[Union[Quaternion, EulerRotation]] = None,
                 scale: Optional[Union[VectorLike, float]] = None) -> None:
        if translation is None:
            translation = Vector3.ZERO
        if rotation is None:
            rotation = Quaternion.IDENTITY
        elif isinstance(rotation, EulerRotation):
            rotation = rotation.to_quaternion()
        elif not isinstance(rotation, Quaternion):
            raise TypeError(
                f"rotation must be a Quaternion or EulerRotation, got {type(rotation).__name__}"
            )
        if scale is None:
            scale = Vector3.ONE
        elif isinstance(scale, Real):
            scale = Vector3(float(scale))

        self._translation = Vector3.coerce(translation)
        # Rotation must stay unit length or every mapping also scales by |q|^2
        self._rotation = rotation.get_normalized()
        self._scale = Vector3.coerce(scale)

    # =========================================================================
    # COMPONENT ACCESS
    # =========================================================================

    @property
    def translation(self) -> Vector3:
        return self._translation

    @property
    def rotation(self) -> Quaternion:
        return self._rotation

    @property
    def scale(self) -> Vector3:
        return self._scale

    def rotator(self) -> EulerRotation:
        """Rotation expressed as Euler angles."""
        return self._rotation.to_euler_rotation()

    def with_translation(self, translation: VectorLike) -> 'Transform':
        return Transform(translation, self._rotation, self._scale)

    def with_rotation(self, rotation: Union[Quaternion, EulerRotation]) -> 'Transform':
        return Transform(self._translation, rotation, self._scale)

    def with_scale(self, scale: Union[VectorLike, float]) -> 'Transform':
        return Transform(self._translation, self._rotation, scale)

    # =========================================================================
    # FORWARD MAPPING (local -> parent)
    # =========================================================================

    def transform_position(self, position: VectorLike) -> Vector3:
        """Map a point: rotate(p * scale) + translation."""
        p = Vector3.coerce(position)
        return self._rotation.rotate_vector(p * self._scale) + self._translation

    def transform_vector(self, vector: VectorLike) -> Vector3:
        """Map a direction: rotate(v * scale). Translation is ignored."""
        v = Vector3.coerce(vector)
        return self._rotation.rotate_vector(v * self._scale)

    def transform_vector_no_scale(self, vector: VectorLike) -> Vector3:
        """Rotate a direction only; both scale and translation are ignored."""
        return self._rotation.rotate_vector(vector)

    def transform_rotation(self, rotation: Quaternion) -> Quaternion:
        """Express a local orientation in the parent frame."""
        return self._rotation * rotation

    # =========================================================================
    # INVERSE MAPPING (parent -> local)
    # =========================================================================

    def inverse_transform_position(self, position: VectorLike) -> Vector3:
        """
        Exact inverse of transform_position().

        Undoes the steps in reverse order: subtract the translation,
        unrotate, then divide by the scale (safe reciprocal for zero
        components).
        """
        p = Vector3.coerce(position)
        local = self._rotation.unrotate_vector(p - self._translation)
        return local * _safe_scale_reciprocal(self._scale)

    def inverse_transform_vector(self, vector: VectorLike) -> Vector3:
        """Exact inverse of transform_vector()."""
        local = self._rotation.unrotate_vector(vector)
        return local * _safe_scale_reciprocal(self._scale)

    def inverse_transform_vector_no_scale(self, vector: VectorLike) -> Vector3:
        """Exact inverse of transform_vector_no_scale()."""
        return self._rotation.unrotate_vector(vector)

    def inverse_transform_rotation(self, rotation: Quaternion) -> Quaternion:
        """Inverse of transform_rotation()."""
        return self._rotation.inverse() * rotation

    # =========================================================================
    # COMPOSITION AND INVERSION
    # =========================================================================

    def __mul__(self, parent: 'Transform') -> 'Transform':
        """
        Compose ``child * parent``: apply self (the child) first, then parent.

        Returns
        -------
        Transform
            Transform mapping child-local coordinates into the frame that
            parent maps into.
        """
        if not isinstance(parent, Transform):
            return NotImplemented

        scale = self._scale * parent._scale
        rotation = parent._rotation * self._rotation
        translation = (parent._rotation.rotate_vector(self._translation * parent._scale)
                       + parent._translation)
        return Transform(translation, rotation, scale)

    def inverse(self, strict: bool = False) -> 'Transform':
        """
        Transform T^-1 with ``T * T^-1 == IDENTITY``.

        The inverse is built so that the composition rule above cancels
        exactly:

            scale'       = 1 / scale
            rotation'    = rotation^-1
            translation' = -(rotation^-1).rotate_vector(translation / scale)

        Parameters
        ----------
        strict : bool, optional
            Raise DegenerateScaleError for a zero scale component instead
            of substituting a reciprocal of 0.

        Returns
        -------
        Transform
            The inverse. With uniform scale (or an identity rotation),
            T^-1.transform_position() also undoes T.transform_position()
            exactly. With non-uniform scale and a general rotation the
            point-wise inverse is not expressible as a TRS; use
            inverse_transform_position() for that.

        Raises
        ------
        DegenerateScaleError
            Only when strict is True and a scale component is zero.
        """
        if _has_degenerate_scale(self._scale):
            if strict:
                raise DegenerateScaleError(
                    f"Cannot invert transform with zero scale component: {self._scale!r}"
                )
            logger.warning("Inverting transform with zero scale component %s; "
                           "substituting reciprocal 0 on that axis", self._scale)

        inv_scale = _safe_scale_reciprocal(self._scale)
        inv_rotation = self._rotation.inverse()
        inv_translation = -inv_rotation.rotate_vector(self._translation * inv_scale)
        return Transform(inv_translation, inv_rotation, inv_scale)

    def get_relative_transform(self, parent: 'Transform', strict: bool = False) -> 'Transform':
        """
        This transform expressed relative to parent.

        Satisfies ``self.get_relative_transform(parent) * parent == self``:

            scale       = self.scale / parent.scale
            rotation    = parent.rotation^-1 * self.rotation
            translation = parent.rotation^-1.rotate_vector(self.translation
                          - parent.translation) / parent.scale

        Zero components of parent.scale follow the same policy as inverse().
        """
        if _has_degenerate_scale(parent._scale):
            if strict:
                raise DegenerateScaleError(
                    f"Cannot express transform relative to zero-scale parent: {parent._scale!r}"
                )
            logger.warning("Relative transform against zero-scale parent %s; "
                           "substituting reciprocal 0 on that axis", parent._scale)

        recip = _safe_scale_reciprocal(parent._scale)
        inv_parent_rotation = parent._rotation.inverse()

        scale = self._scale * recip
        rotation = inv_parent_rotation * self._rotation
        translation = inv_parent_rotation.rotate_vector(
            self._translation - parent._translation) * recip
        return Transform(translation, rotation, scale)

    # =========================================================================
    # INTERPOLATION
    # =========================================================================

    @staticmethod
    def blend(start: 'Transform', end: 'Transform', alpha: float) -> 'Transform':
        """
        Interpolate between two transforms.

        Translation and scale are blended linearly and rotation spherically
        (Quaternion.slerp). alpha outside [0, 1] extrapolates.
        """
        return Transform(
            Vector3.lerp(start._translation, end._translation, alpha),
            Quaternion.slerp(start._rotation, end._rotation, alpha),
            Vector3.lerp(start._scale, end._scale, alpha),
        )

    # =========================================================================
    # AXIS QUERIES
    # =========================================================================

    def get_unit_axis(self, axis: Union[Axis, str]) -> Vector3:
        """Parent-frame unit vector along a local axis (scale and translation ignored)."""
        return self._rotation.rotate_vector(Vector3.unit_axis(axis))

    def get_scaled_axis(self, axis: Union[Axis, str]) -> Vector3:
        """Parent-frame image of a local unit axis, including scale."""
        return self.transform_vector(Vector3.unit_axis(axis))

    def has_uniform_scale(self, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        s = self._scale
        return abs(s.x - s.y) <= tolerance and abs(s.x - s.z) <= tolerance

    # =========================================================================
    # COMPARISON AND DISPLAY
    # =========================================================================

    def equals(self, other: 'Transform', tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """Component-wise tolerance test on translation, rotation (q or -q) and scale."""
        return (self._translation.equals(other._translation, tolerance)
                and self._rotation.equals(other._rotation, tolerance)
                and self._scale.equals(other._scale, tolerance))

    def is_identity(self, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        return self.equals(Transform.IDENTITY, tolerance)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Transform(translation={self._translation!r}, "
                f"rotation={self._rotation!r}, scale={self._scale!r})")


Transform.IDENTITY = Transform()

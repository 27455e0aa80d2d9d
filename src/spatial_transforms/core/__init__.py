"""
===============================================================================
SPATIAL TRANSFORMS - Core Math Types
===============================================================================
Immutable value types for placing, orienting and composing objects in 3D.

Modules:
    constants   -- Tolerances, thresholds and degree/radian conversion
    vector      -- Vector3 and the Axis enum (X forward, Y right, Z up)
    rotator     -- EulerRotation: pitch / yaw / roll in degrees
    quaternion  -- Quaternion: canonical rotation representation
    transform   -- Transform: scale, then rotate, then translate
===============================================================================
"""

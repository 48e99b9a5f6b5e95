"""Modes accepted by the ``-jvm-default`` compiler flag."""

from __future__ import annotations

import enum


class JvmDefault(str, enum.Enum):
    """How ``kotlinc`` emits JVM default methods for interface declarations."""

    ENABLE = "enable"
    NO_COMPATIBILITY = "no-compatibility"
    DISABLE = "disable"

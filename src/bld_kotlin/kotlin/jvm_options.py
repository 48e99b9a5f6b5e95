"""Pass-through options for the JVM running ``kotlinc``.

:class:`JvmOptions` is a plain ``list`` of flags with helpers for the
native-access switches introduced in recent JDKs. Each entry is handed to
the compiler launcher as ``-J<flag>``.
"""

from __future__ import annotations

import enum


class NativeAccess(str, enum.Enum):
    """Values for ``--illegal-native-access``."""

    ALLOW = "allow"
    DENY = "deny"
    WARN = "warn"


class JvmOptions(list):
    """Ordered list of JVM flags.

    Example::

        opts = JvmOptions()
        opts.enable_native_access(JvmOptions.ALL_UNNAMED)
        opts.illegal_native_access(NativeAccess.WARN)
        # ['--enable-native-access=ALL-UNNAMED', '--illegal-native-access=warn']
    """

    ALL_UNNAMED = "ALL-UNNAMED"
    """Keyword matching every module on the class path."""

    def enable_native_access(self, *modules: str) -> JvmOptions:
        """Append ``--enable-native-access=<modules>``.

        The flag is emitted even when *modules* is empty, yielding
        ``--enable-native-access=`` to stay compatible with existing
        build scripts.

        Args:
            modules: Module names, joined with commas.

        Returns:
            This list, for chaining.
        """
        self.append("--enable-native-access=" + ",".join(modules))
        return self

    def illegal_native_access(self, access: NativeAccess) -> JvmOptions:
        """Append ``--illegal-native-access=<allow|deny|warn>``."""
        self.append(f"--illegal-native-access={NativeAccess(access).value}")
        return self

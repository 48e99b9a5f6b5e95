"""Kotlin compilation with an external ``kotlinc``.

The option containers live here; the compile operation is in
:mod:`bld_kotlin.kotlin.operation` and discovery in
:mod:`bld_kotlin.kotlin.locator`.
"""

from bld_kotlin.kotlin.compile_options import CompileOptions
from bld_kotlin.kotlin.compiler_plugin import CompilerPlugin
from bld_kotlin.kotlin.jvm_default import JvmDefault
from bld_kotlin.kotlin.jvm_options import JvmOptions, NativeAccess

__all__ = [
    "CompileOptions",
    "CompilerPlugin",
    "JvmDefault",
    "JvmOptions",
    "NativeAccess",
]

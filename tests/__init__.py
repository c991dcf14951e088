"""
JTE Test Suite

This package contains unit tests for the JTE builtin function layer.

"""

__all__ = [
    "test_type_utils",
    "test_define_builtin",
    "test_builtins",
    "test_from_now",
    "test_registry",
    "test_console_script",
]

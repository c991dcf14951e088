from .builtins import build_builtins, own_names, render_text, to_number

__all__ = ["build_builtins", "own_names", "render_text", "to_number"]

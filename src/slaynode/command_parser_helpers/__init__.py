"""Helper modules for command parsing."""

from .inference import first_script_token, infer_ports, infer_working_directory

__all__ = [
    "first_script_token",
    "infer_ports",
    "infer_working_directory",
]

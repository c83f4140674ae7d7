"""CLI command handlers."""

from .check import cmd_check
from .history import cmd_history
from .plan import cmd_plan
from .providers import cmd_providers
from .refine import cmd_refine

__all__ = [
    "cmd_check",
    "cmd_history",
    "cmd_plan",
    "cmd_providers",
    "cmd_refine",
]

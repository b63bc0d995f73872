"""Interactive kubectl resource selector with key-bound actions."""

__version__ = "0.3.0"

__all__ = [
    "actions",
    "config",
    "kubectl",
    "orchestrator",
    "picker",
    "utils",
]

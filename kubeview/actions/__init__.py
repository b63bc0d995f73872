"""Key-bound actions, the binding registry and the default catalog."""

from .base import (
    Action,
    ActionMetadata,
    BindingConfigurationError,
    SelectionContext,
)
from .catalog import register_default_actions
from .registry import BindingRegistry

__all__ = [
    "Action",
    "ActionMetadata",
    "BindingConfigurationError",
    "BindingRegistry",
    "SelectionContext",
    "register_default_actions",
]

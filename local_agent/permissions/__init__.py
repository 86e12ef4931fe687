"""Permission sandbox -- policy configuration and evaluation for tool calls."""

from .evaluator import PermissionEvaluator
from .policy import (
    DEFAULT_ALLOWED_DIRECTORIES,
    DEFAULT_BLOCKED_DIRECTORIES,
    DEFAULT_BLOCKED_EXTENSIONS,
    DEFAULT_SENSITIVE_FILE_PATTERNS,
    OPERATION_CLASSES,
    PATH_ARGUMENTS,
    OperationClass,
    PolicyConfig,
    default_policy_config,
    path_argument,
)
from .security import collapse_home, find_containing_root, is_within_directory, resolve_path

__all__ = [
    "PermissionEvaluator",
    "PolicyConfig",
    "OperationClass",
    "OPERATION_CLASSES",
    "PATH_ARGUMENTS",
    "path_argument",
    "default_policy_config",
    "DEFAULT_ALLOWED_DIRECTORIES",
    "DEFAULT_BLOCKED_DIRECTORIES",
    "DEFAULT_BLOCKED_EXTENSIONS",
    "DEFAULT_SENSITIVE_FILE_PATTERNS",
    "resolve_path",
    "is_within_directory",
    "find_containing_root",
    "collapse_home",
]

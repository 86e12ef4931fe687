"""Permission evaluation for tool operations.

Every tool call is classified into an OperationClass and, for path-based
classes, checked against the sandbox policy in a fixed order: blacklist,
whitelist, sensitive file name, blocked extension.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from ..types.types import PermissionDecision
from .policy import (
    OPERATION_CLASSES,
    OperationClass,
    PolicyConfig,
    default_policy_config,
    path_argument,
)
from .security import collapse_home, find_containing_root, resolve_path

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """Renders allow/deny decisions for tool calls against a PolicyConfig."""

    def __init__(self, config: PolicyConfig | None = None) -> None:
        self._config = config or default_policy_config()

    @property
    def home(self) -> str:
        return self._config.home

    @property
    def blocked_directories(self) -> list[str]:
        return list(self._config.blocked_directories)

    def classify(self, tool_name: str) -> OperationClass | None:
        return OPERATION_CLASSES.get(tool_name)

    def evaluate(self, tool_name: str, arguments: dict[str, Any] | None) -> PermissionDecision:
        """Decide whether a tool call may run. Never raises.

        Args:
            tool_name: Registered tool name.
            arguments: Tool arguments as supplied by the model.

        Returns:
            PermissionDecision with a reason when denied.
        """
        try:
            args = arguments or {}
            operation = self.classify(tool_name)

            if operation is OperationClass.READ:
                return self._evaluate_path(args.get(path_argument(tool_name)))

            if operation is OperationClass.WRITE:
                return PermissionDecision.deny("Write operations are not supported")

            if operation is OperationClass.SYSTEM_INFO:
                return PermissionDecision.allow()

            if operation is OperationClass.EXECUTION:
                return self._evaluate_path(
                    args.get("path") or args.get("working_dir"), execution=True
                )

            return PermissionDecision.deny(f"Unknown operation: {tool_name}")
        except Exception as exc:
            logger.error("Permission validation error for %s: %s", tool_name, exc)
            return PermissionDecision.deny(f"Validation error: {exc}")

    def _evaluate_path(self, input_path: Any, execution: bool = False) -> PermissionDecision:
        if not input_path:
            if execution:
                # Defaults to the sandbox roots
                return PermissionDecision.allow()
            return PermissionDecision.deny("No path specified")
        if not isinstance(input_path, str):
            return PermissionDecision.deny("Path must be a string")

        resolved = resolve_path(input_path, self._config.home)
        logger.debug("Permission check: %s -> %s", input_path, resolved)

        blocked_root = find_containing_root(resolved, self._config.blocked_directories)
        if blocked_root is not None:
            if execution:
                return PermissionDecision.deny(
                    f"Code execution in {blocked_root} is blocked for security"
                )
            return PermissionDecision.deny(f"Access to {blocked_root} is blocked for security")

        if find_containing_root(resolved, self._config.allowed_directories) is None:
            allowed = ", ".join(
                self.format_for_display(d) for d in self._config.allowed_directories
            )
            prefix = "Code execution denied" if execution else "Access denied"
            return PermissionDecision.deny(
                f"{prefix}. Only these directories are allowed: {allowed}"
            )

        file_name = os.path.basename(resolved)
        if any(p.search(file_name) for p in self._config.compiled_sensitive_patterns()):
            return PermissionDecision.deny(f"File {file_name} appears to contain sensitive data")

        extension = os.path.splitext(resolved)[1].lower()
        blocked_extensions = {ext.lower() for ext in self._config.blocked_extensions}
        if extension and extension in blocked_extensions:
            return PermissionDecision.deny(f"File type {extension} is not allowed for security")

        return PermissionDecision.allow()

    def resolve(self, input_path: str) -> str:
        return resolve_path(input_path, self._config.home)

    def format_for_display(self, path: str) -> str:
        return collapse_home(path, self._config.home)

    def add_allowed_directory(self, directory: str) -> str:
        """Whitelist a directory. Returns the canonical path that was added."""
        resolved = self.resolve(directory)
        if resolved not in self._config.allowed_directories:
            self._config.allowed_directories.append(resolved)
            logger.info("Allowed directory added: %s", resolved)
        return resolved

    def remove_allowed_directory(self, directory: str) -> bool:
        """Remove a whitelisted directory. Returns whether it was present."""
        resolved = self.resolve(directory)
        if resolved not in self._config.allowed_directories:
            return False
        self._config.allowed_directories = [
            d for d in self._config.allowed_directories if d != resolved
        ]
        logger.info("Allowed directory removed: %s", resolved)
        return True

    def get_config(self) -> PolicyConfig:
        """Return a copy of the current policy."""
        return self._config.model_copy(deep=True)

"""Sandbox policy configuration: whitelisted and blocked roots, sensitive names."""

from __future__ import annotations

import os
import re
from enum import Enum

from pydantic import BaseModel, Field

from .security import resolve_path

DEFAULT_ALLOWED_DIRECTORIES = ("~/Documents", "~/Desktop", "~/Downloads")

DEFAULT_BLOCKED_DIRECTORIES = (
    "/System",
    "/private",
    "/Library",
    "/usr",
    "/bin",
    "/sbin",
    "/var",
    "/etc",
    "/tmp",
    "~/.ssh",
    "~/Library/Keychains",
    "~/.aws",
    "~/.config",
)

DEFAULT_SENSITIVE_FILE_PATTERNS = (
    r"\.env$",
    r"\.env\.",
    r"credentials",
    r"password",
    r"id_rsa",
    r"id_dsa",
    r"\.key$",
    r"\.pem$",
    r"\.p12$",
    r"\.pfx$",
    r"wallet\.dat$",
    r"keystore",
)

DEFAULT_BLOCKED_EXTENSIONS = (".app", ".dmg", ".pkg", ".sh", ".command")


class OperationClass(str, Enum):
    """Permission class of a tool operation."""

    READ = "read"
    WRITE = "write"
    SYSTEM_INFO = "system_info"
    EXECUTION = "execution"


OPERATION_CLASSES: dict[str, OperationClass] = {
    "read_file": OperationClass.READ,
    "list_directory": OperationClass.READ,
    "search_files": OperationClass.READ,
    "get_file_info": OperationClass.READ,
    "analyze_json": OperationClass.READ,
    "analyze_csv": OperationClass.READ,
    "analyze_logs": OperationClass.READ,
    "get_disk_usage": OperationClass.READ,
    # Reserved; no write tool is registered
    "write_file": OperationClass.WRITE,
    "append_to_file": OperationClass.WRITE,
    "create_directory": OperationClass.WRITE,
    "delete_file": OperationClass.WRITE,
    "rename_file": OperationClass.WRITE,
    "transform_data": OperationClass.WRITE,
    "list_processes": OperationClass.SYSTEM_INFO,
    "get_system_info": OperationClass.SYSTEM_INFO,
    "execute_code": OperationClass.EXECUTION,
}

# Argument holding the path a read tool's handler acts on; the rest use "path"
PATH_ARGUMENTS: dict[str, str] = {
    "search_files": "directory",
}


def path_argument(tool_name: str) -> str:
    return PATH_ARGUMENTS.get(tool_name, "path")


class PolicyConfig(BaseModel):
    """Directory whitelist/blacklist and filename rules for the sandbox.

    All directory entries are stored as normalised absolute paths.
    """

    home: str = Field(description="Home directory used for ~ and relative paths")
    allowed_directories: list[str] = Field(
        default_factory=list, description="Sandbox roots tools may read from"
    )
    blocked_directories: list[str] = Field(
        default_factory=list, description="Roots that are always denied, even inside a sandbox root"
    )
    sensitive_file_patterns: list[str] = Field(
        default_factory=list,
        description="Regular expressions matched case-insensitively against the file name",
    )
    blocked_extensions: list[str] = Field(
        default_factory=list, description='Denied file extensions (e.g., ".sh")'
    )

    def compiled_sensitive_patterns(self) -> list[re.Pattern[str]]:
        return [re.compile(pattern, re.IGNORECASE) for pattern in self.sensitive_file_patterns]


def default_policy_config(
    home: str | None = None,
    extra_allowed_directories: list[str] | tuple[str, ...] = (),
) -> PolicyConfig:
    """Build the default sandbox policy.

    Args:
        home: Home directory (defaults to the current user's home).
        extra_allowed_directories: Additional sandbox roots (``~`` allowed).

    Returns:
        A PolicyConfig with canonical directory entries.
    """
    home_dir = os.path.normpath(home or os.path.expanduser("~"))

    allowed: list[str] = []
    for directory in (*DEFAULT_ALLOWED_DIRECTORIES, *extra_allowed_directories):
        resolved = resolve_path(directory, home_dir)
        if resolved not in allowed:
            allowed.append(resolved)

    return PolicyConfig(
        home=home_dir,
        allowed_directories=allowed,
        blocked_directories=[resolve_path(d, home_dir) for d in DEFAULT_BLOCKED_DIRECTORIES],
        sensitive_file_patterns=list(DEFAULT_SENSITIVE_FILE_PATTERNS),
        blocked_extensions=list(DEFAULT_BLOCKED_EXTENSIONS),
    )

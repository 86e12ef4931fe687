"""Built-in read-only tool factories."""

from .data import analyze_structure, create_analyze_csv_tool, create_analyze_json_tool
from .files import (
    create_get_file_info_tool,
    create_list_directory_tool,
    create_read_file_tool,
    create_search_files_tool,
)
from .logs import analyze_log_lines, create_analyze_logs_tool
from .system import (
    create_get_disk_usage_tool,
    create_list_processes_tool,
    parse_du_output,
    parse_ps_output,
)

__all__ = [
    "create_read_file_tool",
    "create_list_directory_tool",
    "create_search_files_tool",
    "create_get_file_info_tool",
    "create_get_disk_usage_tool",
    "create_analyze_logs_tool",
    "create_list_processes_tool",
    "create_analyze_json_tool",
    "create_analyze_csv_tool",
    "analyze_structure",
    "analyze_log_lines",
    "parse_du_output",
    "parse_ps_output",
]

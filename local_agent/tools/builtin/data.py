"""Data tools -- structural summaries of JSON and CSV files."""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from pydantic import BaseModel, Field

from ...errors import HandlerError
from ..output import check_file_size, read_text
from ..tool import ToolContext, ToolDefinition

DATA_FILE_MAX_SIZE_MB = 20
JSON_STRUCTURE_MAX_DEPTH = 3
JSON_STRUCTURE_MAX_KEYS = 10
CSV_PREVIEW_ROWS = 100
CSV_SAMPLE_ROWS = 5


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def analyze_structure(
    value: Any,
    depth: int = 0,
    max_depth: int = JSON_STRUCTURE_MAX_DEPTH,
    max_keys: int = JSON_STRUCTURE_MAX_KEYS,
) -> Any:
    """Summarise the shape of a decoded JSON value.

    Objects map their first ``max_keys`` keys to nested summaries, arrays
    collapse to ``"Array[<n>]"``, scalars to their JSON type name. Anything
    deeper than ``max_depth`` becomes ``"..."``.
    """
    if depth > max_depth:
        return "..."
    if isinstance(value, list):
        return f"Array[{len(value)}]"
    if isinstance(value, dict):
        return {
            key: analyze_structure(child, depth + 1, max_depth, max_keys)
            for key, child in list(value.items())[:max_keys]
        }
    return _json_type_name(value)


# -- analyze_json -------------------------------------------------------------


class AnalyzeJsonInput(BaseModel):
    """Input schema for the analyze_json tool."""

    path: str = Field(
        description="JSON file path (e.g., ~/Documents/data.json). Use ~ for home directory."
    )


def create_analyze_json_tool() -> ToolDefinition:
    """Create the analyze_json tool."""

    async def handler(ctx: ToolContext, input: AnalyzeJsonInput) -> dict[str, Any]:
        json_path = ctx.resolve(input.path)
        check_file_size(json_path, DATA_FILE_MAX_SIZE_MB)

        content = read_text(json_path)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise HandlerError(f"Invalid JSON: {exc}") from exc

        analysis: dict[str, Any] = {
            "path": json_path,
            "type": "array" if isinstance(data, list) else "object",
            "size": len(content),
            "structure": analyze_structure(data),
        }
        if isinstance(data, list):
            analysis["array_length"] = len(data)
            analysis["sample_item"] = data[0] if data else None
        elif isinstance(data, dict):
            analysis["keys"] = list(data.keys())
            analysis["key_count"] = len(data)
        else:
            analysis["type"] = _json_type_name(data)
        return analysis

    return ToolDefinition(
        name="analyze_json",
        description="Parse and analyze JSON file structure",
        input_model=AnalyzeJsonInput,
        handler=handler,
    )


# -- analyze_csv --------------------------------------------------------------


class AnalyzeCsvInput(BaseModel):
    """Input schema for the analyze_csv tool."""

    path: str = Field(
        description="CSV file path (e.g., ~/Downloads/data.csv). Use ~ for home directory."
    )


def create_analyze_csv_tool() -> ToolDefinition:
    """Create the analyze_csv tool."""

    async def handler(ctx: ToolContext, input: AnalyzeCsvInput) -> dict[str, Any]:
        csv_path = ctx.resolve(input.path)
        check_file_size(csv_path, DATA_FILE_MAX_SIZE_MB)

        content = read_text(csv_path)
        rows = [
            [field.strip() for field in row]
            for row in csv.reader(io.StringIO(content))
            if any(field.strip() for field in row)
        ]
        if not rows:
            raise HandlerError("CSV file is empty")

        headers = rows[0]
        preview = [
            {header: row[i] if i < len(row) else "" for i, header in enumerate(headers)}
            for row in rows[1 : CSV_PREVIEW_ROWS + 1]
        ]
        return {
            "path": csv_path,
            "total_rows": len(rows) - 1,
            "columns": headers,
            "column_count": len(headers),
            "sample": preview[:CSV_SAMPLE_ROWS],
            "preview": preview,
        }

    return ToolDefinition(
        name="analyze_csv",
        description="Parse and analyze CSV file (first 100 rows)",
        input_model=AnalyzeCsvInput,
        handler=handler,
    )

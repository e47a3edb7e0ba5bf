"""Format a ServiceResult for the requested output mode.

JSON mode dumps the result model as-is. Human mode delegates to the
operation-specific Rich renderers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from builderfolio.output.renderers import render_result

if TYPE_CHECKING:
    from builderfolio.services.result import ServiceResult


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a ServiceResult for display."""
    if json_output:
        return result.model_dump_json(indent=2)
    return render_result(result)

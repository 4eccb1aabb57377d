"""Recording of tool invocations to the tool history directory.

Each invocation gets its own directory named ``<timestamp>_<tool>`` holding a
``record.jsonl`` file.
"""

import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from config import env

logger = logging.getLogger(__name__)


def get_new_invocation_dir(tool_name: str) -> Optional[Path]:
    """Create and return a new directory for this tool invocation."""
    if not env.is_tool_history_enabled():
        return None
    history_dir = Path(env.get_tool_history_path())
    history_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S_%f")
    invocation_dir = history_dir / f"{timestamp}_{tool_name}"
    invocation_dir.mkdir(parents=True, exist_ok=True)
    return invocation_dir


def record_tool_invocation(
    tool_name: str,
    arguments: Dict[str, Any],
    result: Any,
    duration_ms: float,
    success: bool = True,
    error: Optional[str] = None,
    invocation_dir: Optional[Path] = None,
) -> bool:
    """Record a tool invocation to record.jsonl in the invocation directory."""
    if not env.is_tool_history_enabled() or invocation_dir is None:
        return False
    record = {
        "timestamp": datetime.datetime.now().isoformat(),
        "tool": tool_name,
        "arguments": arguments,
        "result": (
            result
            if isinstance(result, (dict, list, str, int, float, bool, type(None)))
            else str(result)
        ),
        "duration_ms": duration_ms,
        "success": success,
    }
    if error:
        record["error"] = error
    record_file = invocation_dir / "record.jsonl"
    try:
        with open(record_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, indent=4, sort_keys=True, default=str) + "\n")
    except OSError as e:
        logger.error(f"Error recording tool invocation: {e}")
        return False
    logger.debug(f"Recorded tool invocation for {tool_name} in {record_file}")
    return True

"""Trace recording for completion rounds."""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

TRACE_DIRNAME = ".gpt_auto_test"


def _trace_dir(workspace: Path) -> Path:
    date_str = datetime.now().strftime("%Y%m%d")
    trace_dir = Path(workspace) / TRACE_DIRNAME / "traces" / date_str
    trace_dir.mkdir(parents=True, exist_ok=True)
    return trace_dir


def _write(workspace: Path, trace_data: dict[str, Any]) -> Path:
    trace_file = _trace_dir(workspace) / f"{trace_data['request_id']}.json"
    with open(trace_file, "w") as f:
        json.dump(trace_data, f, indent=2)
    return trace_file


def record_trace(backend, reply: str, elapsed_ms: int, workspace: Path) -> Path:
    """Record a successful round, including the reply turn.

    The file is named after the backend's request id, matching the
    ``llm.response`` debug event.

    Args:
        backend: Backend that ran the round
        reply: Raw reply text
        elapsed_ms: Round duration
        workspace: Directory under which traces are written

    Returns:
        Path to trace file
    """
    return _write(workspace, {
        "request_id": backend.last_request_id or str(uuid.uuid4()),
        "timestamp": datetime.now().isoformat(),
        "backend": backend.id,
        "model": backend.model,
        "conversation": backend.conversation.messages(),
        "response": {
            "text": reply,
            "elapsed_ms": elapsed_ms,
        },
        "success": True,
    })


def record_error_trace(backend, error: Exception, elapsed_ms: int, workspace: Path) -> Path:
    """Record a failed round.

    Returns:
        Path to trace file
    """
    return _write(workspace, {
        "request_id": str(uuid.uuid4()),
        "timestamp": datetime.now().isoformat(),
        "backend": backend.id,
        "model": backend.model,
        "conversation": backend.conversation.messages(),
        "error": {
            "type": type(error).__name__,
            "message": str(error),
            "elapsed_ms": elapsed_ms,
        },
        "success": False,
    })

"""
Tool Call Logger Module

Append-only JSONL ledger of tool activity:
A. Tool invocations (tool, arguments, outcome, latency)
B. Generated artifacts (audio files written to the public directory)
"""

import hashlib
import json
import logging
import threading
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# Prompts are user text of arbitrary length
MAX_LOGGED_CHARS = 10000


class LogCategory(str, Enum):
    TOOL_CALL = "tool_call"
    ARTIFACT = "artifact"


@dataclass
class ToolCallLog:
    """One tool invocation."""
    log_id: str
    timestamp: str
    category: str
    tool_name: str
    arguments: Dict[str, Any]
    success: bool
    response: str
    latency_ms: float
    error_type: Optional[str] = None
    session_id: Optional[str] = None


@dataclass
class ArtifactLog:
    """A file produced by a tool."""
    log_id: str
    timestamp: str
    artifact_type: str  # audio_mp3, ...
    file_path: str
    file_hash: str
    file_size_bytes: int
    public_url: str
    tool_name: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class ToolLogger:
    """
    Tool activity logger.

    Logs are saved as JSONL (JSON Lines) under ``log_dir``, one file per
    category, so they can be tailed or filtered with standard tools.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        """Singleton pattern for global logger access."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: str):
        if getattr(self, "_initialized", False):
            return

        self.log_dir = Path(log_dir)
        self.session_id = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"

        self.log_files = {
            LogCategory.TOOL_CALL: self.log_dir / "tool_calls.jsonl",
            LogCategory.ARTIFACT: self.log_dir / "artifacts.jsonl",
        }

        self._write_lock = threading.Lock()
        self._initialized = True

    def _generate_id(self, prefix: str = "log") -> str:
        return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"

    def _write_log(self, category: LogCategory, log_data: Dict[str, Any]) -> None:
        """Write log entry to the category's JSONL file."""
        log_file = self.log_files.get(category)
        if not log_file:
            return

        with self._write_lock:
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                with open(log_file, "a", encoding="utf-8") as f:
                    json.dump(log_data, f, ensure_ascii=False, default=str)
                    f.write("\n")
            except OSError as e:
                logger.warning(f"Failed to write {category.value} log: {e}")

    def _compute_hash(self, content: Union[str, bytes]) -> str:
        if isinstance(content, str):
            content = content.encode("utf-8")
        return hashlib.sha256(content).hexdigest()[:16]

    def log_tool_call(
        self,
        tool_name: str,
        arguments: Dict[str, Any],
        success: bool,
        response: str,
        latency_ms: float = 0.0,
        error_type: Optional[str] = None,
    ) -> str:
        """
        Log a tool invocation.

        Returns:
            log_id for reference
        """
        log = ToolCallLog(
            log_id=self._generate_id("call"),
            timestamp=datetime.now().isoformat(),
            category=LogCategory.TOOL_CALL.value,
            tool_name=tool_name,
            arguments={k: str(v)[:MAX_LOGGED_CHARS] for k, v in arguments.items()},
            success=success,
            response=str(response)[:MAX_LOGGED_CHARS],
            latency_ms=latency_ms,
            error_type=error_type,
            session_id=self.session_id,
        )

        self._write_log(LogCategory.TOOL_CALL, asdict(log))
        return log.log_id

    def log_artifact(
        self,
        artifact_type: str,
        file_path: Union[str, Path],
        public_url: str,
        tool_name: str,
        metadata: Optional[Dict] = None,
    ) -> str:
        """
        Log a generated file.

        Args:
            artifact_type: Kind of artifact (audio_mp3, ...)
            file_path: Where the file was written
            public_url: URL the file is served under
            tool_name: Tool that produced it
            metadata: Additional metadata

        Returns:
            log_id for reference
        """
        path = Path(file_path)
        file_size = 0
        file_hash = ""

        if path.exists():
            file_size = path.stat().st_size
            file_hash = self._compute_hash(path.read_bytes())

        log = ArtifactLog(
            log_id=self._generate_id("art"),
            timestamp=datetime.now().isoformat(),
            artifact_type=artifact_type,
            file_path=str(path),
            file_hash=file_hash,
            file_size_bytes=file_size,
            public_url=public_url,
            tool_name=tool_name,
            metadata=metadata or {},
        )

        self._write_log(LogCategory.ARTIFACT, asdict(log))
        return log.log_id

    def read_logs(
        self,
        category: LogCategory,
        limit: int = 100,
        tool_name: Optional[str] = None
    ) -> List[Dict]:
        """Read logs from a category."""
        log_file = self.log_files.get(category)
        if not log_file or not log_file.exists():
            return []

        logs = []
        with open(log_file, "r", encoding="utf-8") as f:
            for line in f:
                try:
                    log = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if tool_name and log.get("tool_name") != tool_name:
                    continue
                logs.append(log)
                if len(logs) >= limit:
                    break

        return logs

    def get_session_stats(self) -> Dict[str, Any]:
        """Count entries written by the current session, per category."""
        stats = {
            "session_id": self.session_id,
            "log_counts": {}
        }

        for category, log_file in self.log_files.items():
            if log_file.exists():
                with open(log_file, "r", encoding="utf-8") as f:
                    count = sum(1 for line in f if self.session_id in line)
                    stats["log_counts"][category.value] = count

        return stats


# ==============================================================================
# Global Logger Access
# ==============================================================================

_logger_instance: Optional[ToolLogger] = None


def get_logger(log_dir: Optional[str] = None) -> ToolLogger:
    """Get or create the global tool logger instance."""
    global _logger_instance
    if _logger_instance is None:
        if log_dir is None:
            from content_tools.config import TOOL_LOG_DIR
            log_dir = TOOL_LOG_DIR
        _logger_instance = ToolLogger(log_dir)
    return _logger_instance


def reset_logger() -> None:
    """Drop the global instance (mainly for testing)."""
    global _logger_instance
    _logger_instance = None
    ToolLogger._instance = None

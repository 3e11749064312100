"""Audit trail for deletion attempts.

Every deletion attempt is recorded twice: as a line on the
``betterrm.audit`` logger (forwarded to syslog when attached) and as a
JSON object appended to ``~/.local/state/better-rm/audit.jsonl``.

Recording is fire-and-forget. A failing sink is logged at debug level
and never changes the outcome of the deletion it describes.
"""

import getpass
import json
import logging
import logging.handlers
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from betterrm.core.paths import APP_NAME, get_audit_log_path
from betterrm.models.outcome import DeletionAction, DeletionOutcome

logger = logging.getLogger(__name__)

AUDIT_LOGGER_NAME = "betterrm.audit"
SYSLOG_SOCKET = "/dev/log"

audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
audit_logger.addHandler(logging.NullHandler())


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """Single audit trail record.

    Attributes:
        timestamp: When the attempt happened (ISO 8601 format with timezone).
        action: Attempted action.
        path: Path the action was applied to.
        user: Login name of the invoking user.
        uid: Real user id of the invoking process.
        pid: Process id of the invoking process.
        success: Whether the attempt succeeded.
        error: OS error text for failed attempts.
        trash_path: Trash destination for trash actions.
    """

    timestamp: str
    action: DeletionAction
    path: str
    user: str
    uid: int
    pid: int
    success: bool
    error: str | None = None
    trash_path: str | None = None

    @classmethod
    def from_outcome(cls, outcome: DeletionOutcome) -> "AuditRecord":
        """Create a record for a deletion outcome, stamped with the current identity."""
        return cls(
            timestamp=datetime.now(UTC).isoformat(),
            action=outcome.action,
            path=outcome.path,
            user=_current_user(),
            uid=os.getuid(),
            pid=os.getpid(),
            success=outcome.success,
            error=outcome.error,
            trash_path=outcome.trash_path,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the record.
        """
        result: dict[str, Any] = {
            "timestamp": self.timestamp,
            "action": self.action.value,
            "path": self.path,
            "user": self.user,
            "uid": self.uid,
            "pid": self.pid,
            "success": self.success,
        }
        if self.error is not None:
            result["error"] = self.error
        if self.trash_path is not None:
            result["trash_path"] = self.trash_path
        return result

    def to_json_line(self) -> str:
        """Serialize to a single JSON line."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    def to_message(self) -> str:
        """Format the record as a syslog message."""
        identity = f"user: {self.user}, uid: {self.uid}"
        if self.success:
            return f"{self.action.value}: {self.path} ({identity})"
        return f"{self.action.value} FAILED: {self.path} ({identity}, error: {self.error})"


class AuditLogger:
    """Records deletion outcomes to the audit trail.

    Storage location: ~/.local/state/better-rm/audit.jsonl

    Attributes:
        log_path: JSON Lines audit file, None to disable file recording.
    """

    def __init__(self, log_path: Path | None = None, *, write_file: bool = True) -> None:
        """Initialize AuditLogger.

        Args:
            log_path: Optional override for the audit file.
                Default: ~/.local/state/better-rm/audit.jsonl
            write_file: If False, only the audit logger receives records.
        """
        if not write_file:
            self.log_path: Path | None = None
        else:
            self.log_path = log_path if log_path is not None else get_audit_log_path()

    def record(self, outcome: DeletionOutcome) -> AuditRecord:
        """Record a deletion outcome.

        Never raises: sink failures are logged at debug level and dropped.

        Args:
            outcome: Outcome of the deletion attempt.

        Returns:
            The AuditRecord that was emitted.
        """
        entry = AuditRecord.from_outcome(outcome)

        level = logging.INFO if entry.success else logging.WARNING
        audit_logger.log(level, entry.to_message())

        if self.log_path is not None:
            self._append(self.log_path, entry)

        return entry

    def _append(self, path: Path, entry: AuditRecord) -> None:
        """Append a record to the audit file, creating parent directories."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open(mode="a", encoding="utf-8", errors="surrogateescape") as f:
                f.write(entry.to_json_line() + "\n")
        except OSError as e:
            logger.debug("Could not write audit record to %s: %s", path, e)


def attach_syslog(address: str = SYSLOG_SOCKET) -> logging.Handler | None:
    """Forward audit records to the local syslog daemon.

    Attaches at most one SysLogHandler (facility LOG_USER) to the audit
    logger. Returns None when the syslog socket is not available.

    Args:
        address: Unix socket of the syslog daemon.

    Returns:
        The attached handler, or None if syslog is unavailable.
    """
    for handler in audit_logger.handlers:
        if isinstance(handler, logging.handlers.SysLogHandler):
            return handler

    if not os.path.exists(address):
        logger.debug("Syslog socket %s not found, audit records stay local", address)
        return None

    try:
        handler = logging.handlers.SysLogHandler(
            address=address,
            facility=logging.handlers.SysLogHandler.LOG_USER,
        )
    except OSError as e:
        logger.debug("Could not connect to syslog at %s: %s", address, e)
        return None

    handler.ident = f"{APP_NAME}[{os.getpid()}]: "
    handler.setFormatter(logging.Formatter("%(message)s"))
    audit_logger.addHandler(handler)
    audit_logger.setLevel(logging.INFO)
    return handler

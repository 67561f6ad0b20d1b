"""Upload service for sshput.

Provides UploadService, which runs a batch of file uploads over a single SFTP
session:

- ``run``: connect, upload every task in order, always close the session
- ``put``: read settings from a ConfigStore, enumerate files from an
  OpenFileSource, then ``run``
- ``ping``: open and close a session to check connectivity

Files are uploaded strictly one after another because they share one SFTP
channel. A failed file never stops the batch; a failed connection aborts the
run before any file is attempted.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any, Optional

from sshput.core.config import CONFIG_KEYS
from sshput.core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT
from sshput.core.exceptions import (
    ConfigurationError,
    ConnectionError,
    IncompleteConfigurationError,
    TransferError,
)
from sshput.core.logging import AuditLogger, get_audit_logger, log_context
from sshput.core.session import SFTPSession, connect
from sshput.models.progress import RunOutcome, RunPhase, UploadReport
from sshput.models.transfer import (
    Credentials,
    ProgressEvent,
    TransferResult,
    TransferTask,
)
from sshput.protocols import ConfigStore, OpenFileSource, ProgressSink
from sshput.uploaders.common import build_tasks
from sshput.uploaders.sftp import upload_file

logger = logging.getLogger(__name__)

Connector = Callable[[Credentials], SFTPSession]
Uploader = Callable[[SFTPSession, str, str], None]


def credentials_from_store(
    store: ConfigStore,
    *,
    port: int = DEFAULT_SSH_PORT,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
) -> Credentials:
    """Read server, path, user and pass from a ConfigStore.

    Raises:
        IncompleteConfigurationError: If any of the four is empty or absent.
    """
    values = {key: store.get(key) or "" for key in CONFIG_KEYS}
    missing = [key for key in CONFIG_KEYS if not values[key]]
    if missing:
        raise IncompleteConfigurationError(missing)

    return Credentials(
        host=values["server"],
        username=values["user"],
        secret=values["pass"],
        remote_base_path=values["path"],
        port=port,
        connect_timeout=connect_timeout,
    )


class UploadService:
    """Sequential batch uploader over one SFTP session per run."""

    def __init__(
        self,
        connector: Connector = connect,
        uploader: Uploader = upload_file,
        audit_logger: Optional[AuditLogger] = None,
    ) -> None:
        """Initialize the service.

        Args:
            connector: Opens a session for the given credentials.
            uploader: Uploads one local file to one remote path.
            audit_logger: Receives one audit record per run.
        """
        self.connector = connector
        self.uploader = uploader
        self.audit = audit_logger or get_audit_logger()
        self.phase = RunPhase.IDLE

    # =========================================================================
    # Run
    # =========================================================================

    def run(
        self,
        credentials: Credentials,
        tasks: Iterable[TransferTask],
        *,
        progress: Optional[ProgressSink] = None,
    ) -> UploadReport:
        """Upload tasks in order over a fresh session.

        Args:
            credentials: Where and as whom to connect.
            tasks: Files to upload; one result is produced per task, in order.
            progress: Optional sink for per-file progress events.

        Returns:
            UploadReport. On connection failure its outcome is ABORTED, its
            results are empty and ``error`` holds the reason.
        """
        tasks = list(tasks)
        start = time.monotonic()

        self.phase = RunPhase.CONNECTING
        logger.info("Connecting to %s for %d file(s)", credentials.target, len(tasks))
        try:
            session = self.connector(credentials)
        except ConnectionError as e:
            self.phase = RunPhase.FAILED
            logger.error("Upload aborted: %s", e.message)
            report = UploadReport(
                outcome=RunOutcome.ABORTED,
                error=e.message,
                duration=time.monotonic() - start,
            )
            self._audit(credentials, report)
            return report

        results: list[TransferResult] = []
        try:
            self.phase = RunPhase.UPLOADING
            total = len(tasks)
            for index, task in enumerate(tasks, start=1):
                self._emit(
                    progress,
                    ProgressEvent(index=index, total=total, relative_path=task.display_path),
                )
                result = self._transfer(session, task)
                results.append(result)
                self._emit(
                    progress,
                    ProgressEvent(
                        index=index,
                        total=total,
                        relative_path=task.display_path,
                        outcome=result.status,
                        message=result.message,
                    ),
                )
        finally:
            self.phase = RunPhase.CLOSING
            session.close()

        self.phase = RunPhase.DONE
        report = UploadReport(
            outcome=RunOutcome.COMPLETED,
            results=results,
            duration=time.monotonic() - start,
        )
        logger.info(
            "Upload complete: %d ok, %d failed, %d skipped",
            report.succeeded,
            report.failed,
            report.skipped,
        )
        self._audit(credentials, report)
        return report

    def _transfer(self, session: SFTPSession, task: TransferTask) -> TransferResult:
        logger.debug("Uploading %s -> %s", task.local_path, task.remote_path)
        try:
            self.uploader(session, task.local_path, task.remote_path)
        except TransferError as e:
            logger.error("Failed to upload %s: %s", task.display_path, e.message)
            return TransferResult.error(task, e.message)
        return TransferResult.ok(task)

    @staticmethod
    def _emit(progress: Optional[ProgressSink], event: ProgressEvent) -> None:
        if progress is not None:
            progress.report(event)

    def _audit(self, credentials: Credentials, report: UploadReport) -> None:
        self.audit.log_operation(
            "upload",
            server=credentials.host,
            user=credentials.username,
            remote_path=credentials.remote_base_path,
            success=report.success,
            details={
                "outcome": report.outcome.value,
                "succeeded": report.succeeded,
                "failed": report.failed,
                "skipped": report.skipped,
            },
        )

    # =========================================================================
    # Put
    # =========================================================================

    def put(
        self,
        store: ConfigStore,
        source: OpenFileSource,
        *,
        progress: Optional[ProgressSink] = None,
        before_upload: Optional[Callable[[], None]] = None,
        port: int = DEFAULT_SSH_PORT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> UploadReport:
        """Upload the files listed by source to the server configured in store.

        Args:
            store: Supplies server, path, user and pass.
            source: Lists the files to upload.
            progress: Optional sink for per-file progress events.
            before_upload: Called before enumeration so files on disk are current.
            port: SSH port.
            connect_timeout: Connect timeout in seconds.

        Returns:
            UploadReport. NOT_CONFIGURED when any setting is missing; COMPLETED
            with no results when there is nothing to upload.
        """
        try:
            credentials = credentials_from_store(
                store, port=port, connect_timeout=connect_timeout
            )
        except ConfigurationError as e:
            logger.warning("Upload cancelled: %s", e.message)
            return UploadReport(outcome=RunOutcome.NOT_CONFIGURED, error=e.message)

        if before_upload is not None:
            before_upload()

        files = source.list()
        if not files:
            logger.info("No workspace files to upload")
            return UploadReport(outcome=RunOutcome.COMPLETED)

        tasks = build_tasks(credentials.remote_base_path, files)
        return self.run(credentials, tasks, progress=progress)

    # =========================================================================
    # Ping
    # =========================================================================

    def ping(self, credentials: Credentials) -> dict[str, Any]:
        """Open and close a session to check connectivity.

        Returns:
            Dict with server, user and latency.

        Raises:
            ConnectionError: If the session cannot be established.
        """
        with log_context("ping", logger, server=credentials.target) as ctx:
            with self.connector(credentials):
                latency = int(ctx.elapsed * 1000)

        return {
            "server": credentials.host,
            "port": credentials.port,
            "user": credentials.username,
            "status": "ok",
            "latency_ms": latency,
        }

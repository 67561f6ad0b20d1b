"""Tests for sshput.services.uploads module."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sshput.core.config import Config, ProfileStore
from sshput.core.exceptions import (
    AuthenticationError,
    ChannelError,
    IncompleteConfigurationError,
    NetworkError,
    TransferError,
)
from sshput.core.logging import AuditLogger
from sshput.core.session import SFTPSession
from sshput.models.progress import RunOutcome, RunPhase
from sshput.models.transfer import Credentials, ProgressEvent, TransferStatus, TransferTask
from sshput.services.uploads import UploadService, credentials_from_store
from sshput.uploaders.common import WorkspaceFile


class RecordingSink:
    """ProgressSink that keeps every event."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    def report(self, event: ProgressEvent) -> None:
        self.events.append(event)


class DictStore:
    """ConfigStore backed by a plain dict."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class ListSource:
    """OpenFileSource over a fixed list."""

    def __init__(self, files: list[WorkspaceFile]) -> None:
        self.files = files
        self.calls = 0

    def list(self) -> list[WorkspaceFile]:
        self.calls += 1
        return list(self.files)


COMPLETE = {"server": "h", "path": "/var/www/app", "user": "u", "pass": "p"}


@pytest.fixture
def workspace(temp_dir: Path) -> Path:
    """Workspace with two files, one nested."""
    (temp_dir / "sub").mkdir()
    (temp_dir / "a.txt").write_text("alpha")
    (temp_dir / "sub" / "b.txt").write_text("bravo")
    return temp_dir


@pytest.fixture
def tasks(workspace: Path) -> list[TransferTask]:
    return [
        TransferTask(
            local_path=str(workspace / "a.txt"),
            remote_path="/var/www/app/a.txt",
            relative_path="a.txt",
        ),
        TransferTask(
            local_path=str(workspace / "sub" / "b.txt"),
            remote_path="/var/www/app/locked/b.txt",
            relative_path="sub/b.txt",
        ),
    ]


@pytest.fixture
def audit() -> MagicMock:
    return MagicMock(spec=AuditLogger)


def _service(session: SFTPSession, audit: MagicMock, **kwargs) -> UploadService:
    connector = MagicMock(return_value=session)
    return UploadService(connector=connector, audit_logger=audit, **kwargs)


# =============================================================================
# credentials_from_store
# =============================================================================


class TestCredentialsFromStore:
    """Tests for reading credentials out of a ConfigStore."""

    def test_complete(self):
        creds = credentials_from_store(DictStore(COMPLETE), port=2222, connect_timeout=5)

        assert creds.host == "h"
        assert creds.remote_base_path == "/var/www/app"
        assert creds.username == "u"
        assert creds.secret == "p"
        assert creds.port == 2222
        assert creds.connect_timeout == 5

    @pytest.mark.parametrize("key", ["server", "path", "user", "pass"])
    def test_missing_key(self, key: str):
        values = {k: v for k, v in COMPLETE.items() if k != key}

        with pytest.raises(IncompleteConfigurationError) as exc_info:
            credentials_from_store(DictStore(values))

        assert exc_info.value.missing == [key]

    def test_empty_value_counts_as_missing(self):
        with pytest.raises(IncompleteConfigurationError):
            credentials_from_store(DictStore({**COMPLETE, "pass": ""}))

    def test_profile_store(self, temp_dir: Path):
        config = Config()
        config.add_profile("default", server="h", path="/srv", user="u", password="p")

        creds = credentials_from_store(ProfileStore(config, config_path=temp_dir / "c.yaml"))

        assert creds.target == "u@h:/srv"


# =============================================================================
# run
# =============================================================================


class TestRun:
    """Tests for UploadService.run."""

    def test_single_file(self, session, fake_sftp, credentials, tasks, audit):
        service = _service(session, audit)

        report = service.run(credentials, tasks[:1])

        assert report.outcome == RunOutcome.COMPLETED
        assert [(r.status, r.local_path, r.remote_path) for r in report.results] == [
            (TransferStatus.OK, tasks[0].local_path, "/var/www/app/a.txt"),
        ]
        assert fake_sftp.files["/var/www/app/a.txt"] == b"alpha"
        assert report.success is True

    def test_failure_isolated_to_one_file(self, session, fake_sftp, credentials, tasks, audit):
        fake_sftp.fail_put["/var/www/app/locked/b.txt"] = PermissionError(13, "Permission denied")
        service = _service(session, audit)

        report = service.run(credentials, tasks)

        assert [r.status for r in report.results] == [TransferStatus.OK, TransferStatus.ERROR]
        assert "Permission denied" in report.results[1].message
        assert report.outcome == RunOutcome.COMPLETED
        assert report.success is False
        assert report.errors == [f"{tasks[1].local_path}: {report.results[1].message}"]
        session.client.close.assert_called_once()

    def test_later_files_still_attempted(self, session, fake_sftp, credentials, tasks, audit):
        fake_sftp.fail_put["/var/www/app/a.txt"] = OSError("Failure")
        service = _service(session, audit)

        report = service.run(credentials, tasks)

        assert [r.status for r in report.results] == [TransferStatus.ERROR, TransferStatus.OK]
        assert fake_sftp.ops("put") == ["/var/www/app/a.txt", "/var/www/app/locked/b.txt"]

    def test_one_result_per_task_in_order(self, session, credentials, tasks, audit):
        uploader = MagicMock(side_effect=[TransferError("x", "y", "boom"), None] * 2)
        service = _service(session, audit, uploader=uploader)

        report = service.run(credentials, tasks + tasks)

        assert len(report.results) == 4
        assert [r.remote_path for r in report.results] == [t.remote_path for t in tasks + tasks]
        assert [c.args[1:] for c in uploader.call_args_list] == [
            (t.local_path, t.remote_path) for t in tasks + tasks
        ]

    @pytest.mark.parametrize(
        "error",
        [
            AuthenticationError("h", "Authentication failed."),
            NetworkError("h", "timed out"),
            ChannelError("h", "subsystem request failed"),
        ],
    )
    def test_connection_failure_aborts(self, credentials, tasks, audit, error):
        uploader = MagicMock()
        service = UploadService(
            connector=MagicMock(side_effect=error), uploader=uploader, audit_logger=audit
        )

        report = service.run(credentials, tasks)

        assert report.outcome == RunOutcome.ABORTED
        assert report.aborted is True
        assert report.results == []
        assert report.error == error.message
        assert service.phase == RunPhase.FAILED
        uploader.assert_not_called()

    def test_empty_task_list(self, session, credentials, audit):
        uploader = MagicMock()
        service = _service(session, audit, uploader=uploader)

        report = service.run(credentials, [])

        assert report.outcome == RunOutcome.COMPLETED
        assert report.results == []
        assert session.closed is True
        uploader.assert_not_called()

    def test_session_closed_exactly_once(self, session, credentials, tasks, audit):
        service = _service(session, audit)

        service.run(credentials, tasks)

        assert session.closed is True
        session.client.close.assert_called_once()
        assert session.sftp.closed is True

    def test_unexpected_error_still_closes(self, session, credentials, tasks, audit):
        uploader = MagicMock(side_effect=RuntimeError("bug"))
        service = _service(session, audit, uploader=uploader)

        with pytest.raises(RuntimeError):
            service.run(credentials, tasks)

        session.client.close.assert_called_once()
        assert service.phase == RunPhase.CLOSING

    def test_phase_done(self, session, credentials, tasks, audit):
        service = _service(session, audit)
        assert service.phase == RunPhase.IDLE

        service.run(credentials, tasks)

        assert service.phase == RunPhase.DONE

    def test_progress_events(self, session, fake_sftp, credentials, tasks, audit):
        fake_sftp.fail_put["/var/www/app/locked/b.txt"] = PermissionError(13, "Permission denied")
        sink = RecordingSink()
        service = _service(session, audit)

        service.run(credentials, tasks, progress=sink)

        assert [(e.index, e.total, e.relative_path, e.outcome) for e in sink.events] == [
            (1, 2, "a.txt", None),
            (1, 2, "a.txt", TransferStatus.OK),
            (2, 2, "sub/b.txt", None),
            (2, 2, "sub/b.txt", TransferStatus.ERROR),
        ]
        assert "Permission denied" in sink.events[-1].message

    def test_audit_record(self, session, credentials, tasks, audit):
        service = _service(session, audit)

        service.run(credentials, tasks[:1])

        audit.log_operation.assert_called_once()
        kwargs = audit.log_operation.call_args.kwargs
        assert kwargs["server"] == "h"
        assert kwargs["user"] == "u"
        assert kwargs["success"] is True
        assert kwargs["details"]["succeeded"] == 1

    def test_secret_not_logged(self, session, credentials, tasks, caplog):
        service = _service(session, AuditLogger())

        with caplog.at_level(logging.DEBUG):
            service.run(credentials, tasks)

        assert "'p'" not in caplog.text
        assert "secret" not in caplog.text


# =============================================================================
# put
# =============================================================================


class TestPut:
    """Tests for UploadService.put."""

    def test_uploads_listed_files(self, session, fake_sftp, workspace, audit):
        source = ListSource(
            [
                WorkspaceFile(str(workspace / "a.txt"), "a.txt"),
                WorkspaceFile(str(workspace / "sub" / "b.txt"), "sub/b.txt"),
            ]
        )
        service = _service(session, audit)

        report = service.put(DictStore(COMPLETE), source)

        assert report.succeeded == 2
        assert fake_sftp.files["/var/www/app/sub/b.txt"] == b"bravo"
        assert "/var/www/app/sub" in fake_sftp.ops("mkdir")

    def test_not_configured(self, audit):
        connector = MagicMock()
        source = ListSource([WorkspaceFile("/ws/a.txt", "a.txt")])
        service = UploadService(connector=connector, audit_logger=audit)

        report = service.put(DictStore({"server": "h"}), source)

        assert report.outcome == RunOutcome.NOT_CONFIGURED
        assert "path" in report.error
        assert source.calls == 0
        connector.assert_not_called()

    def test_nothing_to_upload_skips_connect(self, audit):
        connector = MagicMock()
        service = UploadService(connector=connector, audit_logger=audit)

        report = service.put(DictStore(COMPLETE), ListSource([]))

        assert report.outcome == RunOutcome.COMPLETED
        assert report.total == 0
        connector.assert_not_called()

    def test_before_upload_runs_before_listing(self, audit):
        order: list[str] = []
        source = MagicMock()
        source.list.side_effect = lambda: order.append("list") or []
        service = UploadService(connector=MagicMock(), audit_logger=audit)

        service.put(DictStore(COMPLETE), source, before_upload=lambda: order.append("save"))

        assert order == ["save", "list"]

    def test_port_and_timeout_passed_through(self, session, workspace, audit):
        connector = MagicMock(return_value=session)
        service = UploadService(connector=connector, audit_logger=audit)
        source = ListSource([WorkspaceFile(str(workspace / "a.txt"), "a.txt")])

        service.put(DictStore(COMPLETE), source, port=2222, connect_timeout=3)

        creds: Credentials = connector.call_args.args[0]
        assert creds.port == 2222
        assert creds.connect_timeout == 3


# =============================================================================
# ping
# =============================================================================


class TestPing:
    """Tests for UploadService.ping."""

    def test_ping(self, session, credentials, audit):
        service = _service(session, audit)

        result = service.ping(credentials)

        assert result["server"] == "h"
        assert result["status"] == "ok"
        assert result["latency_ms"] >= 0
        assert session.closed is True

    def test_ping_failure_propagates(self, credentials, audit):
        service = UploadService(
            connector=MagicMock(side_effect=NetworkError("h", "refused")), audit_logger=audit
        )

        with pytest.raises(NetworkError):
            service.ping(credentials)

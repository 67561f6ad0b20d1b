"""Tests for sshput.models."""

from __future__ import annotations

import pydantic
import pytest

from sshput.models.progress import RunOutcome, UploadReport
from sshput.models.transfer import (
    Credentials,
    ProgressEvent,
    TransferResult,
    TransferStatus,
    TransferTask,
)


class TestCredentials:
    """Tests for Credentials model."""

    def test_defaults(self, credentials: Credentials):
        assert credentials.port == 22
        assert credentials.connect_timeout == 10
        assert credentials.target == "u@h:/var/www/app"

    def test_secret_hidden_from_repr(self, credentials: Credentials):
        assert "secret" not in repr(credentials)
        assert "'p'" not in repr(credentials)

    @pytest.mark.parametrize("field", ["host", "username", "secret", "remote_base_path"])
    def test_required_fields_non_empty(self, field: str):
        values = {"host": "h", "username": "u", "secret": "p", "remote_base_path": "/srv"}
        values[field] = ""

        with pytest.raises(pydantic.ValidationError):
            Credentials(**values)

    def test_port_range(self):
        with pytest.raises(pydantic.ValidationError):
            Credentials(host="h", username="u", secret="p", remote_base_path="/srv", port=0)

    def test_frozen(self, credentials: Credentials):
        with pytest.raises(pydantic.ValidationError):
            credentials.host = "other"


class TestTransferResult:
    """Tests for TransferTask and TransferResult."""

    def test_display_path(self):
        assert TransferTask(local_path="/ws/a", remote_path="/r/a").display_path == "/ws/a"
        task = TransferTask(local_path="/ws/a", remote_path="/r/a", relative_path="a")
        assert task.display_path == "a"

    def test_factories(self):
        task = TransferTask(local_path="/ws/a.txt", remote_path="/var/www/app/a.txt")

        ok = TransferResult.ok(task)
        err = TransferResult.error(task, "Permission denied")
        skipped = TransferResult.skipped(task)

        assert (ok.status, ok.message) == (TransferStatus.OK, None)
        assert (err.status, err.message) == (TransferStatus.ERROR, "Permission denied")
        assert skipped.status == TransferStatus.SKIPPED
        assert err.remote_path == "/var/www/app/a.txt"

    def test_to_dict(self):
        task = TransferTask(local_path="/ws/a.txt", remote_path="/var/www/app/a.txt")

        assert TransferResult.ok(task).to_dict() == {
            "local_path": "/ws/a.txt",
            "remote_path": "/var/www/app/a.txt",
            "status": "ok",
        }

    def test_progress_event_start_has_no_outcome(self):
        event = ProgressEvent(index=1, total=3, relative_path="a.txt")
        assert event.outcome is None


class TestUploadReport:
    """Tests for UploadReport aggregation."""

    def _report(self) -> UploadReport:
        tasks = [
            TransferTask(local_path=f"/ws/{n}", remote_path=f"/r/{n}") for n in ("a", "b", "c")
        ]
        return UploadReport(
            outcome=RunOutcome.COMPLETED,
            results=[
                TransferResult.ok(tasks[0]),
                TransferResult.error(tasks[1], "boom"),
                TransferResult.skipped(tasks[2]),
            ],
            duration=1.23456,
        )

    def test_counts(self):
        report = self._report()
        assert (report.total, report.succeeded, report.failed, report.skipped) == (3, 1, 1, 1)
        assert report.success is False
        assert report.errors == ["/ws/b: boom"]

    def test_empty_completed_is_success(self):
        report = UploadReport(outcome=RunOutcome.COMPLETED)
        assert report.success is True
        assert report.aborted is False

    def test_aborted(self):
        report = UploadReport(outcome=RunOutcome.ABORTED, error="Authentication failed")
        assert report.aborted is True
        assert report.success is False
        assert report.results == []

    def test_to_dict(self):
        data = self._report().to_dict()
        assert data["outcome"] == "completed"
        assert data["duration"] == 1.235
        assert [r["status"] for r in data["results"]] == ["ok", "error", "skipped"]

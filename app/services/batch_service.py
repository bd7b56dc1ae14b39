"""
Bulk operations over sets of replays.

Each item is handled on its own: a failure is recorded in the returned
report and the remaining items are still processed.
"""

import io
import os
import zipfile
import structlog
from dataclasses import dataclass, field
from typing import List, Optional
from exceptions import ReplayVaultException, ValidationException
from metrics import replay_status_changes_total, replay_exports_total, replay_export_entries_total
from models.enums import ReplayStatus, coerce_enum, enum_values
from repositories.replays_repository import ReplaysRepository

logger = structlog.get_logger()


@dataclass
class BatchItemResult:
    replay_id: int
    success: bool
    error: Optional[str] = None

    def to_dict(self):
        return {"id": self.replay_id, "success": self.success, "error": self.error}


@dataclass
class BatchReport:
    """Ordered per-item outcomes of a bulk operation"""

    items: List[BatchItemResult] = field(default_factory=list)

    def add(self, replay_id, success=True, error=None):
        self.items.append(BatchItemResult(replay_id, success, error))

    @property
    def succeeded(self):
        return [item.replay_id for item in self.items if item.success]

    @property
    def failed(self):
        return [item.replay_id for item in self.items if not item.success]

    @property
    def ok(self):
        return not self.failed

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def to_dict(self):
        return {
            "total": len(self.items),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass
class ExportResult:
    archive: bytes
    report: BatchReport

    @property
    def entry_count(self):
        return len(self.report)


def archive_entry_name(replay):
    """Zip entry name from the stored, sanitized file name"""
    return f"{replay.id}-{os.path.basename(replay.replay_file)}"


class BatchService:
    """Bulk status changes and bulk zip exports"""

    def __init__(self, lifecycle):
        self.lifecycle = lifecycle

    def bulk_change_status(self, ids, new_status):
        """
        Set status on every existing replay in ids.

        No transition or field validation is applied: any member of
        ReplayStatus is written as-is, e.g. "downloaded" on a replay that has
        no file. Only the status value itself must be a known status.
        """
        ids = list(ids or [])
        try:
            status = coerce_enum(ReplayStatus, new_status)
        except ValueError:
            raise ValidationException(
                f"{new_status!r} is not a valid status",
                errors=[{"field": "status", "error": f"must be one of {', '.join(enum_values(ReplayStatus))}"}],
            )
        if status is None:
            raise ValidationException("status can't be blank", errors=[{"field": "status", "error": "can't be blank"}])

        report = BatchReport()
        for replay in ReplaysRepository.get_by_ids(ids):
            replay_id = replay.id
            try:
                ReplaysRepository.set_fields(replay_id, status=status)
            except ReplayVaultException as e:
                replay_status_changes_total.labels(status=status.value, source="bulk", outcome="error").inc()
                report.add(replay_id, success=False, error=e.message)
                continue
            replay_status_changes_total.labels(status=status.value, source="bulk", outcome="success").inc()
            report.add(replay_id)

        logger.info(
            "bulk_status_changed",
            status=status.value,
            requested=len(ids),
            succeeded=len(report.succeeded),
            failed=len(report.failed),
        )
        return report

    def bulk_export(self, ids, actor):
        """
        Zip the files of the given replays in load order, naming each entry
        <id>-<filename>, and mark every included replay as downloaded.

        Replays without a file are skipped. A file that cannot be read
        aborts the whole export.
        """
        ids = list(ids or [])
        replays = [r for r in ReplaysRepository.get_by_ids(ids) if r.replay_file]

        report = BatchReport()
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zip_file:
                for replay in replays:
                    replay_id = replay.id
                    data = self.lifecycle.file_store.read(replay.replay_file)
                    zip_file.writestr(archive_entry_name(replay), data)
                    replay_export_entries_total.inc()

                    try:
                        self.lifecycle.mark_downloaded(replay, actor)
                    except ReplayVaultException as e:
                        report.add(replay_id, success=False, error=e.message)
                        continue
                    report.add(replay_id)
        except ReplayVaultException:
            replay_exports_total.labels(outcome="error").inc()
            raise

        replay_exports_total.labels(outcome="success").inc()
        logger.info("bulk_export_built", requested=len(ids), entries=len(report), size=buffer.tell())
        return ExportResult(archive=buffer.getvalue(), report=report)

"""
Tests for VideoJobTracker.
"""

import asyncio

import pytest
from conftest import VIDEO_BYTES, ScriptedBackend

from genstudio.backends.base import BackendError
from genstudio.jobs.errors import (
    DownloadFailed,
    GenerationFailed,
    InvalidRequest,
    JobCancelled,
    MissingArtifact,
    PollFailed,
    SubmissionFailed,
)
from genstudio.jobs.tracker import VideoJobTracker
from genstudio.progress.observer import StatusSlot


class TestStream:
    @pytest.mark.asyncio
    async def test_successful_job(self, backend, blob_store, test_settings):
        tracker = VideoJobTracker(backend, blob_store, test_settings)

        statuses = [s async for s in tracker.stream("a cat")]
        progress = [s.progress for s in statuses]

        assert progress == [0, 25, 35, 45, 55, 95, 100]
        assert progress == sorted(progress)
        assert [s.is_terminal for s in statuses].count(True) == 1
        final = statuses[-1]
        assert final.phase == "done"
        assert final.artifact_ref is not None
        assert blob_store.get(final.artifact_ref).data == VIDEO_BYTES
        assert all(s.job_handle == statuses[0].job_handle for s in statuses)

    @pytest.mark.asyncio
    async def test_progress_non_decreasing_for_any_poll_count(self, blob_store, test_settings):
        for pending in (0, 1, 5, 10, 20):
            tracker = VideoJobTracker(ScriptedBackend(pending_polls=pending), blob_store, test_settings)

            progress = [s.progress async for s in tracker.stream("a cat")]

            assert progress == sorted(progress)
            assert progress[-1] == 100

    @pytest.mark.asyncio
    async def test_submission_failure_emits_nothing(self, blob_store, test_settings):
        backend = ScriptedBackend(submit_error=BackendError("boom"))
        tracker = VideoJobTracker(backend, blob_store, test_settings)
        statuses = []

        with pytest.raises(GenerationFailed) as exc_info:
            async for status in tracker.stream("a cat"):
                statuses.append(status)

        assert statuses == []
        assert isinstance(exc_info.value.cause, SubmissionFailed)
        assert backend.status_calls == []

    @pytest.mark.asyncio
    async def test_invalid_request_emits_nothing(self, backend, blob_store, test_settings):
        tracker = VideoJobTracker(backend, blob_store, test_settings)

        with pytest.raises(GenerationFailed) as exc_info:
            async for _ in tracker.stream(""):
                pass

        assert isinstance(exc_info.value.cause, InvalidRequest)
        assert backend.submit_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "backend_kwargs, cause_type, detail",
        [
            ({"poll_error_at": 1}, PollFailed, "503"),
            ({"artifact_uri": None}, MissingArtifact, "No video link"),
            ({"download_status": 404, "download_reason": "Not Found"}, DownloadFailed, "Not Found"),
            (
                {"pending_polls": 0, "download_error": RuntimeError("connection reset")},
                DownloadFailed,
                "connection reset",
            ),
        ],
    )
    async def test_failures_end_with_one_error_status(
        self, blob_store, test_settings, backend_kwargs, cause_type, detail
    ):
        tracker = VideoJobTracker(ScriptedBackend(**backend_kwargs), blob_store, test_settings)
        statuses = []

        with pytest.raises(GenerationFailed) as exc_info:
            async for status in tracker.stream("a cat"):
                statuses.append(status)

        assert isinstance(exc_info.value.cause, cause_type)
        terminal = [s for s in statuses if s.is_terminal]
        assert terminal == [statuses[-1]]
        assert statuses[-1].phase == "error"
        assert detail in statuses[-1].message
        assert statuses[-1].artifact_ref is None

    @pytest.mark.asyncio
    async def test_cancelled_job(self, blob_store, test_settings):
        backend = ScriptedBackend(pending_polls=100)
        cancel = asyncio.Event()
        tracker = VideoJobTracker(backend, blob_store, test_settings, poll_interval=0.01)
        statuses = []

        with pytest.raises(GenerationFailed) as exc_info:
            async for status in tracker.stream("a cat", cancel=cancel):
                statuses.append(status)
                if len(backend.status_calls) == 2:
                    cancel.set()

        assert isinstance(exc_info.value.cause, JobCancelled)
        assert statuses[-1].phase == "cancelled"
        assert len(backend.status_calls) == 2
        assert backend.download_calls == []


class TestGenerateVideo:
    @pytest.mark.asyncio
    async def test_returns_artifact_and_notifies(self, backend, blob_store, test_settings):
        tracker = VideoJobTracker(backend, blob_store, test_settings)
        seen = []

        artifact = await tracker.generate_video("a cat", on_status=seen.append)

        assert artifact.ref in blob_store
        assert [s.progress for s in seen] == [0, 25, 35, 45, 55, 95, 100]
        assert seen[-1].artifact_ref == artifact.ref

    @pytest.mark.asyncio
    async def test_slot_holds_latest_status(self, backend, blob_store, test_settings):
        tracker = VideoJobTracker(backend, blob_store, test_settings)
        slot = StatusSlot()

        await tracker.generate_video("a cat", slot=slot)

        assert slot.current is not None
        assert slot.current.phase == "done"
        assert slot.current.progress == 100

    @pytest.mark.asyncio
    async def test_failure_leaves_error_in_slot(self, blob_store, test_settings):
        backend = ScriptedBackend(download_status=500, download_reason="Internal Server Error")
        tracker = VideoJobTracker(backend, blob_store, test_settings)
        slot = StatusSlot()

        with pytest.raises(GenerationFailed, match="Internal Server Error"):
            await tracker.generate_video("a cat", slot=slot)

        assert slot.current is not None
        assert slot.current.phase == "error"

    @pytest.mark.asyncio
    async def test_concurrent_jobs_do_not_share_status(self, blob_store, test_settings):
        fast = VideoJobTracker(ScriptedBackend(pending_polls=1), blob_store, test_settings)
        slow = VideoJobTracker(ScriptedBackend(pending_polls=6), blob_store, test_settings)
        fast_seen: list = []
        slow_seen: list = []

        fast_artifact, slow_artifact = await asyncio.gather(
            fast.generate_video("one", on_status=fast_seen.append),
            slow.generate_video("two", on_status=slow_seen.append),
        )

        assert fast_artifact.ref != slow_artifact.ref
        assert len(fast_seen) == 6
        assert len(slow_seen) == 11
        for seen in (fast_seen, slow_seen):
            progress = [s.progress for s in seen]
            assert progress == sorted(progress)
            assert progress[-1] == 100

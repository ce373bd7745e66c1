"""
Storage Controller Tests

Tests cover:
1. Default session names
2. Saving captures and trim editor results
3. Playback queue construction
4. Error reporting through on_storage_error
"""

from datetime import datetime

import pytest

from playback.models.clip import Clip
from storage.constants import MediaType
from storage.interfaces.storage_interface import (
    NotFoundError,
    StorageFailure,
    ValidationError,
)
from storage.models.media_item import CropRect
from storage.utils.naming_utils import generate_session_name


@pytest.mark.unit
class TestSessions:
    """Session operations"""

    def test_default_session_name(self, storage_controller):
        """Name is built from the clock reading (2025-01-15 14:30)"""
        session = storage_controller.create_session()
        assert session.name == "Session Jan 15, 2:30 PM"

    def test_explicit_name(self, storage_controller):
        assert storage_controller.create_session("Sparring").name == "Sparring"

    @pytest.mark.parametrize(
        "moment, expected",
        [
            (datetime(2025, 10, 18, 0, 5), "Session Oct 18, 12:05 AM"),
            (datetime(2025, 10, 18, 12, 0), "Session Oct 18, 12:00 PM"),
            (datetime(2025, 3, 2, 9, 41), "Session Mar 2, 9:41 AM"),
        ],
    )
    def test_generate_session_name(self, moment, expected):
        assert generate_session_name(moment) == expected

    def test_delete_session_delegates(self, storage_controller):
        session = storage_controller.create_session("S1")
        storage_controller.delete_session(session.id)
        assert storage_controller.list_sessions() == []


@pytest.mark.unit
class TestCaptures:
    """save_capture()"""

    def test_save_video_capture(self, storage_controller):
        session = storage_controller.create_session("S1")

        item = storage_controller.save_capture(
            session.id,
            MediaType.VIDEO,
            b"video-bytes",
            duration=4.2,
            trim_needed=True,
        )

        assert item.order == 0
        assert item.trim_needed is True
        assert storage_controller.get_media_item(item.id).payload == b"video-bytes"
        assert storage_controller.get_session(session.id).item_count == 1

    def test_photo_duration_is_dropped(self, storage_controller):
        session = storage_controller.create_session("S1")

        item = storage_controller.save_capture(session.id, MediaType.PHOTO, b"jpg", duration=3.0)

        assert item.duration is None

    def test_each_capture_gets_new_id(self, storage_controller):
        session = storage_controller.create_session("S1")
        first = storage_controller.save_capture(session.id, MediaType.PHOTO, b"1")
        second = storage_controller.save_capture(session.id, MediaType.PHOTO, b"2")

        assert first.id != second.id
        assert [i.order for i in storage_controller.get_media(session.id)] == [0, 1]


@pytest.mark.unit
class TestSaveEdit:
    """Trim editor saves"""

    def test_save_edit_marks_clip_fixed(self, storage_controller):
        session = storage_controller.create_session("S1")
        item = storage_controller.save_capture(
            session.id,
            MediaType.VIDEO,
            b"v",
            duration=6.0,
            trim_needed=True,
        )
        crop = CropRect(0.0, 0.125, 1.0, 0.75)

        edited = storage_controller.save_edit(item.id, trim_end_time=4.0, crop=crop)

        assert edited.trim_needed is False
        assert edited.trim_end_time == 4.0
        assert edited.duration == 4.0
        assert edited.crop == crop
        assert storage_controller.needs_editor(edited) is False

    def test_save_edit_without_trim_keeps_duration(self, storage_controller):
        session = storage_controller.create_session("S1")
        item = storage_controller.save_capture(session.id, MediaType.VIDEO, b"v", duration=6.0)

        edited = storage_controller.save_edit(item.id, crop=CropRect.full_frame())

        assert edited.duration == 6.0
        assert edited.trim_end_time is None

    def test_trim_past_end_rejected(self, storage_controller, event_tracker):
        session = storage_controller.create_session("S1")
        item = storage_controller.save_capture(session.id, MediaType.VIDEO, b"v", duration=2.0)
        storage_controller.on_storage_error = event_tracker.track

        with pytest.raises(ValidationError):
            storage_controller.save_edit(item.id, trim_end_time=2.5)

        assert event_tracker.was_called()
        assert storage_controller.get_media_item(item.id).trim_end_time is None

    def test_invalid_crop_rejected(self, storage_controller):
        session = storage_controller.create_session("S1")
        item = storage_controller.save_capture(session.id, MediaType.VIDEO, b"v", duration=2.0)

        with pytest.raises(ValidationError):
            storage_controller.save_edit(item.id, crop=CropRect(0.5, 0.5, 0.6, 0.5))

    def test_edit_unknown_item(self, storage_controller):
        with pytest.raises(NotFoundError):
            storage_controller.save_edit("missing", trim_end_time=1.0)


@pytest.mark.unit
class TestPlaybackQueue:
    """get_playback_queue()"""

    def test_queue_is_ordered_videos_only(self, storage_controller):
        session = storage_controller.create_session("S1")
        v0 = storage_controller.save_capture(session.id, MediaType.VIDEO, b"a", 5.0)
        storage_controller.save_capture(session.id, MediaType.PHOTO, b"p")
        v1 = storage_controller.save_capture(session.id, MediaType.VIDEO, b"b", 3.0)
        reversed_ids = [i.id for i in reversed(storage_controller.get_media(session.id))]
        storage_controller.reorder(session.id, reversed_ids)

        queue = storage_controller.get_playback_queue(session.id)

        assert all(isinstance(clip, Clip) for clip in queue)
        assert [clip.media_id for clip in queue] == [v1.id, v0.id]

    def test_queue_references_payload(self, storage_controller):
        session = storage_controller.create_session("S1")
        item = storage_controller.save_capture(session.id, MediaType.VIDEO, b"x" * 64, 1.0)

        clip = storage_controller.get_playback_queue(session.id)[0]

        assert clip.payload is storage_controller.get_media_item(item.id).payload

    def test_queue_carries_trim(self, storage_controller):
        session = storage_controller.create_session("S1")
        item = storage_controller.save_capture(session.id, MediaType.VIDEO, b"v", 3.0)
        storage_controller.save_edit(item.id, trim_end_time=1.5)

        clip = storage_controller.get_playback_queue(session.id)[0]

        assert clip.effective_end == 1.5


@pytest.mark.unit
class TestDisplay:

    def test_needs_editor_only_for_flagged_videos(self, storage_controller):
        session = storage_controller.create_session("S1")
        flagged = storage_controller.save_capture(
            session.id, MediaType.VIDEO, b"v", 3.0, trim_needed=True,
        )
        photo = storage_controller.save_capture(
            session.id, MediaType.PHOTO, b"p", trim_needed=True,
        )

        assert storage_controller.needs_editor(flagged) is True
        assert storage_controller.needs_editor(photo) is False

    def test_format_clip_duration(self, storage_controller):
        session = storage_controller.create_session("S1")
        item = storage_controller.save_capture(session.id, MediaType.VIDEO, b"v", 75.4)

        assert storage_controller.format_clip_duration(item) == "1:15"


@pytest.mark.unit
class TestErrorReporting:
    """Failures are reported, then re-raised"""

    def test_failed_capture_fires_callback_and_raises(
        self,
        storage_controller,
        mock_storage,
        event_tracker,
    ):
        session = storage_controller.create_session("S1")
        storage_controller.on_storage_error = event_tracker.track
        mock_storage.fail_next("add_media_item")

        with pytest.raises(StorageFailure):
            storage_controller.save_capture(session.id, MediaType.VIDEO, b"v", 2.0)

        assert event_tracker.get_call_count() == 1
        assert "Could not save clip" in event_tracker.call_args[0]
        assert storage_controller.get_media(session.id) == []

    def test_capture_into_missing_session(self, storage_controller, event_tracker):
        storage_controller.on_storage_error = event_tracker.track

        with pytest.raises(NotFoundError):
            storage_controller.save_capture("ghost", MediaType.PHOTO, b"p")

        assert event_tracker.was_called()

    def test_bad_callback_does_not_hide_error(self, storage_controller, mock_storage):
        def broken(message):
            raise RuntimeError("ui gone")

        storage_controller.on_storage_error = broken
        mock_storage.fail_next("create_session")

        with pytest.raises(StorageFailure):
            storage_controller.create_session("S1")

"""
Clip Preview Tests

Single-clip playback: clamp at the trim point, hold at natural end, replay.
"""

import pytest

from playback.constants import PreviewState
from playback.models.clip import Clip


@pytest.mark.unit
class TestClipPreview:

    def test_trimmed_clip_holds_at_trim_point(self, preview, mock_surface, callback_tracker):
        preview.on_held = callback_tracker.track("held")
        preview.open(Clip(media_id="a", duration=3.0, trim_end_time=1.5))

        mock_surface.play_through()

        assert preview.state == PreviewState.HELD
        assert preview.held_position == 1.5
        assert ("hold", 1.5) in mock_surface.commands
        assert mock_surface.get_position() == 1.5
        assert callback_tracker.calls == [("held", (1.5,))]

    def test_held_clip_does_not_advance(self, preview, mock_surface):
        """There is no next clip: further updates change nothing"""
        preview.open(Clip(media_id="a", duration=3.0, trim_end_time=1.5))
        mock_surface.play_through()

        mock_surface.advance_to(2.5)
        mock_surface.finish()

        assert preview.state == PreviewState.HELD
        assert mock_surface.loaded_ids == ["a"]

    def test_untrimmed_clip_holds_at_natural_end(self, preview, mock_surface):
        preview.open(Clip(media_id="a", duration=2.0))

        mock_surface.play_through()

        assert preview.state == PreviewState.HELD
        assert preview.held_position == 2.0
        assert not any(command[0] == "hold" for command in mock_surface.commands)

    def test_zero_trim_holds_immediately(self, preview, mock_surface):
        preview.open(Clip(media_id="a", duration=2.0, trim_end_time=0.0))

        assert preview.state == PreviewState.HELD
        assert mock_surface.commands[-1] == ("hold", 0.0)

    def test_negative_trim_holds_at_zero(self, preview, mock_surface):
        preview.open(Clip(media_id="a", duration=2.0, trim_end_time=-0.75))

        assert preview.state == PreviewState.HELD
        assert preview.held_position == 0.0
        assert mock_surface.commands[-1] == ("hold", 0.0)
        assert mock_surface.get_position() == 0.0

    def test_replay_restarts_from_zero(self, preview, mock_surface):
        preview.open(Clip(media_id="a", duration=3.0, trim_end_time=1.5))
        mock_surface.play_through()

        assert preview.replay() is True

        assert preview.state == PreviewState.PLAYING
        assert mock_surface.get_position() == 0.0
        assert mock_surface.loaded_ids == ["a", "a"]

    def test_replay_only_from_held(self, preview):
        preview.open(Clip(media_id="a", duration=3.0))
        assert preview.replay() is False

    def test_close_releases_surface(self, preview, mock_surface):
        preview.open(Clip(media_id="a", duration=3.0))

        preview.close()
        preview.close()

        assert preview.state == PreviewState.CLOSED
        assert mock_surface.current_clip is None
        assert mock_surface.commands.count(("release",)) == 1

    def test_reopen_after_close(self, preview, mock_surface):
        preview.open(Clip(media_id="a", duration=3.0))
        preview.close()

        preview.open(Clip(media_id="b", duration=1.0))
        mock_surface.play_through()

        assert preview.state == PreviewState.HELD
        assert preview.clip.media_id == "b"

"""Tests for mapping pointer positions to native screenshot pixels."""

import math

import pytest

from coordinate_picker import PickerSession, PickResult, fit_within, to_image_coordinates


class TestMapping:

    def test_centre_maps_to_image_centre(self):
        assert to_image_coordinates(480, 270, 960, 540, 1920, 1080) == (960, 540)

    @pytest.mark.parametrize("image_size", [(1920, 1080), (801, 601), (3, 5), (1, 1), (2559, 1439)])
    @pytest.mark.parametrize("display_size", [(960, 540), (317, 211), (1, 3), (1366, 767)])
    def test_centre_maps_for_any_size(self, image_size, display_size):
        image_w, image_h = image_size
        display_w, display_h = display_size
        expected = (math.floor(image_w / 2 + 0.5), math.floor(image_h / 2 + 0.5))
        assert to_image_coordinates(display_w / 2, display_h / 2, display_w, display_h, image_w, image_h) == expected

    def test_corners(self):
        assert to_image_coordinates(0, 0, 960, 540, 1920, 1080) == (0, 0)
        assert to_image_coordinates(960, 540, 960, 540, 1920, 1080) == (1920, 1080)

    def test_rounds_half_up(self):
        # 1 / 4 * 10 = 2.5
        assert to_image_coordinates(1, 1, 4, 4, 10, 10) == (3, 3)

    def test_clamps_outside_pointer(self):
        assert to_image_coordinates(-20, 700, 960, 540, 1920, 1080) == (0, 1080)

    def test_degenerate_display(self):
        assert to_image_coordinates(5, 5, 0, 0, 100, 100) == (0, 0)

    def test_fit_within_never_upscales(self):
        assert fit_within(800, 600, 1920, 1080) == (800, 600)

    def test_fit_within_keeps_aspect_ratio(self):
        assert fit_within(3840, 2160, 1920, 1080) == (1920, 1080)
        assert fit_within(2000, 1000, 1000, 1000) == (1000, 500)

    def test_fit_within_minimum_size(self):
        assert fit_within(10000, 1, 100, 100) == (100, 1)
        assert fit_within(0, 0, 100, 100) == (1, 1)


class TestPickerSession:

    def test_lifecycle(self):
        session = PickerSession()
        assert not session.active
        session.begin("a1", 1920, 1080)
        assert session.active
        assert session.action_id == "a1"
        assert session.track(480, 270, 960, 540) == (960, 540)
        result = session.commit()
        assert result == PickResult("a1", 960, 540)
        assert not session.active

    def test_commit_unpacks_as_tuple(self):
        session = PickerSession()
        session.begin("a2", 801, 601)
        session.track(317 / 2, 211 / 2, 317, 211)
        action_id, x, y = session.commit()
        assert (action_id, x, y) == ("a2", 401, 301)

    def test_commit_without_begin(self):
        assert PickerSession().commit() is None

    def test_cancel_discards_position(self):
        session = PickerSession()
        session.begin("a1", 100, 100)
        session.track(10, 10, 100, 100)
        session.cancel()
        assert not session.active
        assert session.position == (0, 0)
        assert session.commit() is None

    def test_track_without_begin_is_ignored(self):
        session = PickerSession()
        assert session.track(5, 5, 10, 10) == (0, 0)

    def test_begin_rejects_empty_image(self):
        with pytest.raises(ValueError):
            PickerSession().begin("a1", 0, 100)

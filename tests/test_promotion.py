"""Tests for click-to-drag promotion."""

from cultimap.selection.drag_state import ModifierFlags
from cultimap.selection.promotion import GesturePromotion


class TestGesturePromotion:
    def test_unarmed_never_promotes(self):
        promotion = GesturePromotion()
        assert promotion.observe(100, 100) is None

    def test_small_move_does_not_promote(self):
        promotion = GesturePromotion(threshold=5)
        promotion.arm(200, 300, 100, 100)
        assert promotion.observe(104, 100) is None
        assert promotion.is_armed

    def test_exact_threshold_does_not_promote(self):
        promotion = GesturePromotion(threshold=5)
        promotion.arm(200, 300, 100, 100)
        assert promotion.observe(103, 104) is None

    def test_promotes_once_past_threshold(self):
        promotion = GesturePromotion(threshold=5)
        promotion.arm(200, 300, 100, 100, ModifierFlags(ctrl=True))
        pending = promotion.observe(106, 100)
        assert pending is not None
        # The drag starts from the original press, in content coordinates
        assert (pending.content_x, pending.content_y) == (200, 300)
        assert pending.modifiers.additive
        assert promotion.observe(120, 100) is None
        assert not promotion.is_armed

    def test_distance_is_euclidean(self):
        promotion = GesturePromotion()
        promotion.arm(0, 0, 10, 10)
        assert promotion.distance_to(13, 14) == 5.0

    def test_cancel(self):
        promotion = GesturePromotion()
        promotion.arm(0, 0, 10, 10)
        assert promotion.cancel() is True
        assert promotion.cancel() is False
        assert promotion.observe(100, 100) is None

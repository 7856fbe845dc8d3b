from __future__ import annotations

from pathlib import Path
import sys
import unittest

import numpy as np


SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

try:
    import cv2  # noqa: F401
    _HAS_CV2 = True
except ImportError:
    _HAS_CV2 = False

from route_cinematics.errors import BufferLengthMismatch
from route_cinematics.frames import (
    Frame,
    blend_frames,
    lighten_composite,
    motion_blur,
    screen_composite,
)


def _solid(rgb: tuple[int, int, int], alpha: int = 255, width: int = 4, height: int = 3) -> Frame:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = rgb
    pixels[..., 3] = alpha
    return Frame(pixels)


class FrameTest(unittest.TestCase):
    def test_from_buffer_wraps_packed_rgba(self) -> None:
        data = bytes(range(2 * 3 * 4))
        frame = Frame.from_buffer(data, width=2, height=3)

        self.assertEqual((frame.width, frame.height, frame.nbytes), (2, 3, 24))
        self.assertEqual(frame.to_bytes(), data)
        self.assertEqual(tuple(frame.pixels[0, 1]), (4, 5, 6, 7))

    def test_from_buffer_rejects_wrong_length(self) -> None:
        with self.assertRaises(BufferLengthMismatch):
            Frame.from_buffer(b"\x00" * 23, width=2, height=3)

    def test_rejects_non_rgba_arrays(self) -> None:
        with self.assertRaises(ValueError):
            Frame(np.zeros((3, 4, 3), dtype=np.uint8))
        with self.assertRaises(ValueError):
            Frame(np.zeros((3, 4, 4), dtype=np.float32))


class BlendFramesTest(unittest.TestCase):
    def test_ratio_zero_and_one_return_the_endpoints(self) -> None:
        a = _solid((10, 20, 30))
        b = _solid((200, 100, 0))

        self.assertTrue(blend_frames(a, b, 0.0).same_pixels(a))
        self.assertTrue(blend_frames(a, b, 1.0).same_pixels(b))

    def test_rounds_half_up(self) -> None:
        blended = blend_frames(_solid((0, 0, 1)), _solid((255, 1, 2)), 0.5)
        self.assertEqual(tuple(blended.pixels[0, 0, :3]), (128, 1, 2))

    def test_alpha_is_copied_from_the_first_frame(self) -> None:
        blended = blend_frames(_solid((0, 0, 0), alpha=40), _solid((255, 255, 255), alpha=200), 1.0)

        self.assertEqual(tuple(blended.pixels[0, 0]), (255, 255, 255, 40))

    def test_mismatched_frames_raise(self) -> None:
        with self.assertRaises(BufferLengthMismatch):
            blend_frames(_solid((0, 0, 0)), _solid((0, 0, 0), width=5), 0.5)
        # Same byte length, different shape.
        with self.assertRaises(BufferLengthMismatch):
            blend_frames(_solid((0, 0, 0), width=4, height=3), _solid((0, 0, 0), width=3, height=4), 0.5)

    def test_ratio_outside_unit_interval_raises(self) -> None:
        with self.assertRaises(ValueError):
            blend_frames(_solid((0, 0, 0)), _solid((0, 0, 0)), 1.5)


class CrossfadeCompositeTest(unittest.TestCase):
    def test_screen_composite_brightens(self) -> None:
        a = _solid((100, 0, 255))
        b = _solid((200, 0, 0))

        full = screen_composite(a, b, 1.0)
        # 255 - 155 * 55 / 255 = 221.57
        self.assertEqual(tuple(full.pixels[0, 0, :3]), (222, 0, 255))
        self.assertTrue(screen_composite(a, b, 0.0).same_pixels(a))

    def test_screen_composite_partial_opacity(self) -> None:
        blended = screen_composite(_solid((100, 100, 100)), _solid((200, 200, 200)), 0.3)
        # 100 + (221.57 - 100) * 0.3 = 136.47
        self.assertEqual(int(blended.pixels[0, 0, 0]), 136)

    def test_lighten_composite_keeps_lighter_channel(self) -> None:
        a = _solid((100, 200, 50))
        b = _solid((150, 100, 50))

        full = lighten_composite(a, b, 1.0)
        self.assertEqual(tuple(full.pixels[0, 0, :3]), (150, 200, 50))
        half = lighten_composite(a, b, 0.5)
        self.assertEqual(tuple(half.pixels[0, 0, :3]), (125, 200, 50))


class MotionBlurTest(unittest.TestCase):
    def test_tiny_sigma_is_a_no_op(self) -> None:
        frame = _solid((1, 2, 3))
        self.assertIs(motion_blur(frame, 0.05), frame)

    @unittest.skipUnless(_HAS_CV2, "OpenCV required")
    def test_blur_softens_edges_and_keeps_shape(self) -> None:
        pixels = np.zeros((9, 9, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        pixels[:, 5:, :3] = 255
        frame = Frame(pixels)

        blurred = motion_blur(frame, 1.5)
        self.assertEqual(blurred.pixels.shape, frame.pixels.shape)
        self.assertEqual(blurred.pixels.dtype, np.uint8)
        self.assertGreater(int(blurred.pixels[4, 4, 0]), 0)
        self.assertLess(int(blurred.pixels[4, 5, 0]), 255)

    @unittest.skipUnless(_HAS_CV2, "OpenCV required")
    def test_uniform_frame_is_unchanged_by_blur(self) -> None:
        frame = _solid((90, 120, 150))
        self.assertTrue(motion_blur(frame, 2.0).same_pixels(frame))


if __name__ == "__main__":
    unittest.main()

import unittest

import numpy as np

from repcount.keypoints import Keypoint
from repcount.overlay import KEYPOINT_COLOR, draw_keypoints, draw_status


class OverlayTests(unittest.TestCase):
    def test_draws_only_confident_keypoints(self) -> None:
        frame = np.zeros((100, 100, 3), dtype=np.uint8)
        draw_keypoints(frame, [Keypoint(y=20.0, x=30.0, score=0.9), Keypoint(y=70.0, x=70.0, score=0.2)])
        self.assertEqual(tuple(frame[20, 30]), KEYPOINT_COLOR)
        self.assertEqual(int(frame[60:80, 60:80].sum()), 0)

    def test_no_keypoints_is_a_no_op(self) -> None:
        frame = np.zeros((50, 50, 3), dtype=np.uint8)
        draw_keypoints(frame, None)
        self.assertEqual(int(frame.sum()), 0)

    def test_status_text_is_drawn(self) -> None:
        frame = np.zeros((120, 400, 3), dtype=np.uint8)
        draw_status(frame, "Elbow: 150.0 | Pos: up | Reps: 2")
        self.assertGreater(int(frame[:40].sum()), 0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

import unittest

from repcount.angles import angle_at, elbow_angle
from repcount.keypoints import Keypoint, KeypointIdx


def _blank_pose(score: float = 0.0) -> list[Keypoint]:
    return [Keypoint(y=0.0, x=0.0, score=score) for _ in range(17)]


class AngleAtTests(unittest.TestCase):
    def test_right_angle(self) -> None:
        kps = [Keypoint(0.0, 0.0, 1.0), Keypoint(0.0, 1.0, 1.0), Keypoint(1.0, 1.0, 1.0)]
        self.assertAlmostEqual(angle_at(kps, 0, 1, 2), 90.0, delta=1e-3)

    def test_straight_and_folded_limbs(self) -> None:
        straight = [Keypoint(0.0, 0.0, 1.0), Keypoint(10.0, 0.0, 1.0), Keypoint(20.0, 0.0, 1.0)]
        folded = [Keypoint(0.0, 0.0, 1.0), Keypoint(10.0, 0.0, 1.0), Keypoint(5.0, 0.0, 1.0)]
        self.assertAlmostEqual(angle_at(straight, 0, 1, 2), 180.0, places=4)
        self.assertAlmostEqual(angle_at(folded, 0, 1, 2), 0.0, places=4)

    def test_low_confidence_disqualifies_any_point(self) -> None:
        for low in range(3):
            kps = [Keypoint(0.0, 0.0, 1.0), Keypoint(0.0, 1.0, 1.0), Keypoint(1.0, 1.0, 1.0)]
            kps[low] = kps[low]._replace(score=0.19)
            self.assertIsNone(angle_at(kps, 0, 1, 2))

    def test_threshold_score_is_accepted(self) -> None:
        kps = [Keypoint(0.0, 0.0, 0.2), Keypoint(0.0, 1.0, 0.2), Keypoint(1.0, 1.0, 0.2)]
        self.assertIsNotNone(angle_at(kps, 0, 1, 2))

    def test_coincident_points_give_none(self) -> None:
        same_as_a = [Keypoint(3.0, 4.0, 1.0), Keypoint(3.0, 4.0, 1.0), Keypoint(9.0, 4.0, 1.0)]
        same_as_c = [Keypoint(0.0, 4.0, 1.0), Keypoint(3.0, 4.0, 1.0), Keypoint(3.0, 4.0, 1.0)]
        self.assertIsNone(angle_at(same_as_a, 0, 1, 2))
        self.assertIsNone(angle_at(same_as_c, 0, 1, 2))


class ElbowAngleTests(unittest.TestCase):
    def _set_arm(self, kps, shoulder, elbow, wrist, bent: bool) -> None:
        kps[shoulder] = Keypoint(100.0, 100.0, 0.9)
        kps[elbow] = Keypoint(200.0, 100.0, 0.9)
        # bent arm: wrist to the side of the elbow (90 deg); straight: wrist below it (180 deg)
        kps[wrist] = Keypoint(200.0, 200.0, 0.9) if bent else Keypoint(300.0, 100.0, 0.9)

    def test_averages_both_sides(self) -> None:
        kps = _blank_pose()
        self._set_arm(kps, KeypointIdx.LEFT_SHOULDER, KeypointIdx.LEFT_ELBOW, KeypointIdx.LEFT_WRIST, bent=True)
        self._set_arm(kps, KeypointIdx.RIGHT_SHOULDER, KeypointIdx.RIGHT_ELBOW, KeypointIdx.RIGHT_WRIST, bent=False)
        self.assertAlmostEqual(elbow_angle(kps), 135.0, places=4)

    def test_falls_back_to_visible_side(self) -> None:
        kps = _blank_pose()
        self._set_arm(kps, KeypointIdx.RIGHT_SHOULDER, KeypointIdx.RIGHT_ELBOW, KeypointIdx.RIGHT_WRIST, bent=True)
        self.assertAlmostEqual(elbow_angle(kps), 90.0, places=4)

    def test_no_visible_arm(self) -> None:
        self.assertIsNone(elbow_angle(_blank_pose(score=0.1)))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

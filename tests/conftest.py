import numpy as np
import pytest

from magic_mirror.config import MirrorConfig
from magic_mirror.coordinate_mapper import CoordinateMapper
from magic_mirror.pose_source import JOINT_LANDMARKS, LANDMARK_COUNT, Landmark
from magic_mirror.skeleton import (
    Joint, JointTrackingState, JointType, Skeleton, SkeletonPoint, SkeletonTrackingState,
)

# Rough standing pose, normalised image coordinates
STANDING_POSE = {
    0: (0.50, 0.15),    # nose
    11: (0.60, 0.30), 12: (0.40, 0.30),
    13: (0.65, 0.45), 14: (0.35, 0.45),
    15: (0.67, 0.58), 16: (0.33, 0.58),
    17: (0.68, 0.62), 18: (0.32, 0.62),
    19: (0.67, 0.63), 20: (0.33, 0.63),
    23: (0.56, 0.60), 24: (0.44, 0.60),
    25: (0.57, 0.75), 26: (0.43, 0.75),
    27: (0.57, 0.90), 28: (0.43, 0.90),
    31: (0.59, 0.94), 32: (0.41, 0.94),
}


def make_landmarks(visibility=0.9, overrides=None):
    overrides = overrides or {}
    landmarks = []
    for i in range(LANDMARK_COUNT):
        x, y = STANDING_POSE.get(i, (0.5, 0.5))
        landmarks.append(Landmark(x, y, visibility))
    for i, landmark in overrides.items():
        landmarks[i] = landmark
    return landmarks


def make_skeleton(state=JointTrackingState.TRACKED, overrides=None, z=2.0):
    """A tracked skeleton built from the standing pose at depth z"""
    mapper = CoordinateMapper()
    joints = {}
    for joint_type, sources in JOINT_LANDMARKS.items():
        x = sum(STANDING_POSE[i][0] * w for i, w in sources) * 640
        y = sum(STANDING_POSE[i][1] * w for i, w in sources) * 480
        position = mapper.map_depth_point_to_skeleton_point(x, y, z * 1000)
        joints[joint_type] = Joint(joint_type, position, state)
    for joint_type, joint_state in (overrides or {}).items():
        joints[joint_type] = Joint(joint_type, joints[joint_type].position, joint_state)
    return Skeleton(
        tracking_id=1,
        tracking_state=SkeletonTrackingState.TRACKED,
        position=joints[JointType.HIP_CENTER].position,
        joints=joints,
    )


class FakeDevice:
    def __init__(self, depth=None, color=None, fail=None):
        self.depth = np.full((480, 640), 2000, dtype=np.uint16) if depth is None else depth
        self.color = np.zeros((480, 640, 3), dtype=np.uint8) if color is None else color
        self.fail = fail
        self.stopped = 0

    def read_depth(self):
        if self.fail is not None:
            raise self.fail
        return self.depth

    def read_video(self):
        return self.color

    def stop(self):
        self.stopped += 1


class FakePoseEstimator:
    def __init__(self, landmarks=None):
        self.landmarks = landmarks
        self.frames = []
        self.closed = 0

    def estimate(self, bgr):
        self.frames.append(bgr)
        return self.landmarks

    def close(self):
        self.closed += 1


@pytest.fixture
def config():
    return MirrorConfig()


@pytest.fixture
def mapper():
    return CoordinateMapper()


@pytest.fixture
def root_point():
    return SkeletonPoint(0.1, -0.2, 2.5)

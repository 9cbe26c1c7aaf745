"""
Skeleton data produced by the sensor for each frame.
Joint names and tracking states follow the Kinect v1 skeleton stream.
"""

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Dict, List, Optional

import numpy as np


class JointType(IntEnum):
    HIP_CENTER = 0
    SPINE = 1
    SHOULDER_CENTER = 2
    HEAD = 3
    SHOULDER_LEFT = 4
    ELBOW_LEFT = 5
    WRIST_LEFT = 6
    HAND_LEFT = 7
    SHOULDER_RIGHT = 8
    ELBOW_RIGHT = 9
    WRIST_RIGHT = 10
    HAND_RIGHT = 11
    HIP_LEFT = 12
    KNEE_LEFT = 13
    ANKLE_LEFT = 14
    FOOT_LEFT = 15
    HIP_RIGHT = 16
    KNEE_RIGHT = 17
    ANKLE_RIGHT = 18
    FOOT_RIGHT = 19


# Joints the sensor drops when tracking a seated user
LEG_JOINTS = (
    JointType.HIP_LEFT, JointType.KNEE_LEFT, JointType.ANKLE_LEFT, JointType.FOOT_LEFT,
    JointType.HIP_RIGHT, JointType.KNEE_RIGHT, JointType.ANKLE_RIGHT, JointType.FOOT_RIGHT,
)


class JointTrackingState(IntEnum):
    NOT_TRACKED = 0
    INFERRED = 1
    TRACKED = 2


class SkeletonTrackingState(IntEnum):
    NOT_TRACKED = 0
    POSITION_ONLY = 1
    TRACKED = 2


class FrameEdges(IntFlag):
    NONE = 0
    RIGHT = 1
    LEFT = 2
    TOP = 4
    BOTTOM = 8


@dataclass(frozen=True)
class SkeletonPoint:
    """3D position in metres, sensor space (x right, y up, z away from the lens)"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Joint:
    joint_type: JointType
    position: SkeletonPoint = SkeletonPoint()
    tracking_state: JointTrackingState = JointTrackingState.NOT_TRACKED

    @property
    def is_tracked(self) -> bool:
        return self.tracking_state == JointTrackingState.TRACKED

    @property
    def is_inferred(self) -> bool:
        return self.tracking_state == JointTrackingState.INFERRED


@dataclass
class Skeleton:
    """One detected person"""
    tracking_id: int
    tracking_state: SkeletonTrackingState
    position: SkeletonPoint = SkeletonPoint()
    joints: Dict[JointType, Joint] = field(default_factory=dict)
    clipped_edges: FrameEdges = FrameEdges.NONE

    def joint(self, joint_type: JointType) -> Joint:
        """Look up a joint; joints the sensor never reported read as not tracked"""
        found = self.joints.get(joint_type)
        if found is None:
            return Joint(joint_type)
        return found


@dataclass
class SkeletonFrame:
    frame_number: int
    timestamp: float
    skeletons: List[Skeleton] = field(default_factory=list)
    # BGR colour image the skeletons were estimated from
    color_image: Optional[np.ndarray] = None

"""
Body segment table.
Each row pairs two joints with the sprite drawn between them and the pixel
offset (tuned by eye) from the origin joint to the sprite's top-left corner.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .coordinate_mapper import CoordinateMapper, ScreenPoint
from .geometry import angle_from_points
from .skeleton import Joint, JointTrackingState, JointType, Skeleton


@dataclass(frozen=True)
class BodySegment:
    name: str
    origin: JointType
    destination: JointType
    sprite: str
    offset_x: int = 0
    offset_y: int = 0


@dataclass(frozen=True)
class SegmentPlacement:
    segment: BodySegment
    origin: ScreenPoint
    destination: ScreenPoint
    left: int
    top: int
    angle: float
    # both endpoints directly observed
    tracked: bool


SEGMENTS: Tuple[BodySegment, ...] = (
    # Torso
    BodySegment("head", JointType.HEAD, JointType.SHOULDER_CENTER, "head.png", 25, 10),
    BodySegment("torso", JointType.SHOULDER_CENTER, JointType.SPINE, "torso.png", 20, 30),
    BodySegment("hip", JointType.SPINE, JointType.HIP_CENTER, "hip.png", 20, 20),

    # Left arm
    BodySegment("upper_arm_left", JointType.SHOULDER_LEFT, JointType.ELBOW_LEFT, "upper_arm_left.png", 40, 10),
    BodySegment("forearm_left", JointType.ELBOW_LEFT, JointType.WRIST_LEFT, "forearm_left.png", 40, 10),
    BodySegment("hand_left", JointType.WRIST_LEFT, JointType.HAND_LEFT, "hand_left.png", 35, 15),

    # Right arm
    BodySegment("upper_arm_right", JointType.SHOULDER_RIGHT, JointType.ELBOW_RIGHT, "upper_arm_right.png", 50, 10),
    BodySegment("forearm_right", JointType.ELBOW_RIGHT, JointType.WRIST_RIGHT, "forearm_right.png", 50, 0),
    BodySegment("hand_right", JointType.WRIST_RIGHT, JointType.HAND_RIGHT, "hand_right.png", 45, 0),

    # Left leg
    BodySegment("thigh_left", JointType.HIP_LEFT, JointType.KNEE_LEFT, "thigh_left.png", 40, 25),
    BodySegment("shin_left", JointType.KNEE_LEFT, JointType.ANKLE_LEFT, "shin_left.png", 50, 0),
    BodySegment("foot_left", JointType.ANKLE_LEFT, JointType.FOOT_LEFT, "foot_left.png", 30, 0),

    # Right leg
    BodySegment("thigh_right", JointType.HIP_RIGHT, JointType.KNEE_RIGHT, "thigh_right.png", 40, 25),
    BodySegment("shin_right", JointType.KNEE_RIGHT, JointType.ANKLE_RIGHT, "shin_right.png", 40, 0),
    BodySegment("foot_right", JointType.ANKLE_RIGHT, JointType.FOOT_RIGHT, "foot_right.png", 60, -10),
)

SEGMENTS_BY_NAME = {segment.name: segment for segment in SEGMENTS}


def should_draw(joint0: Joint, joint1: Joint) -> bool:
    """A segment needs both joints found, and at least one of them actually seen"""
    if (joint0.tracking_state == JointTrackingState.NOT_TRACKED or
            joint1.tracking_state == JointTrackingState.NOT_TRACKED):
        return False

    if joint0.is_inferred and joint1.is_inferred:
        return False

    return True


def place_segment(skeleton: Skeleton, segment: BodySegment,
                  mapper: CoordinateMapper) -> Optional[SegmentPlacement]:
    joint0 = skeleton.joint(segment.origin)
    joint1 = skeleton.joint(segment.destination)

    if not should_draw(joint0, joint1):
        return None

    origin = mapper.map_skeleton_point_to_depth_point(joint0.position)
    destination = mapper.map_skeleton_point_to_depth_point(joint1.position)

    return SegmentPlacement(
        segment=segment,
        origin=origin,
        destination=destination,
        left=origin.x + segment.offset_x,
        top=origin.y + segment.offset_y,
        angle=angle_from_points(origin, destination),
        tracked=joint0.is_tracked and joint1.is_tracked,
    )


def place_segments(skeleton: Skeleton, mapper: CoordinateMapper,
                   segments=SEGMENTS) -> Iterator[SegmentPlacement]:
    for segment in segments:
        placement = place_segment(skeleton, segment, mapper)
        if placement is not None:
            yield placement

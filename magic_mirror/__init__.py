"""
magic_mirror - Kinect cartoon mirror
Overlays a cartoon character's limbs on the tracked skeleton of the person
in front of the sensor.
"""

__version__ = "0.1.0"

from .coordinate_mapper import CoordinateMapper, ScreenPoint
from .geometry import angle_from_points
from .segments import SEGMENTS, BodySegment, SegmentPlacement, place_segment, place_segments, should_draw
from .skeleton import (
    FrameEdges, Joint, JointTrackingState, JointType,
    Skeleton, SkeletonFrame, SkeletonPoint, SkeletonTrackingState,
)

__all__ = [
    "CoordinateMapper",
    "ScreenPoint",
    "angle_from_points",
    "SEGMENTS",
    "BodySegment",
    "SegmentPlacement",
    "place_segment",
    "place_segments",
    "should_draw",
    "FrameEdges",
    "Joint",
    "JointTrackingState",
    "JointType",
    "Skeleton",
    "SkeletonFrame",
    "SkeletonPoint",
    "SkeletonTrackingState",
    "__version__",
]

"""
Skeleton space <-> depth image space transforms for a 640x480 depth stream.
"""

import sys
from typing import NamedTuple

from .skeleton import SkeletonPoint

DEPTH_WIDTH = 640
DEPTH_HEIGHT = 480

# Nominal focal length of the Kinect v1 depth camera at 320x240
SKELETON_TO_DEPTH_MULTIPLIER_320x240 = 285.63


class ScreenPoint(NamedTuple):
    x: int
    y: int


class CoordinateMapper:
    """Maps sensor-space points into the fixed render space and back"""

    def __init__(self, width=DEPTH_WIDTH, height=DEPTH_HEIGHT):
        self.width = width
        self.height = height

    def map_skeleton_point_to_depth_point(self, point: SkeletonPoint) -> ScreenPoint:
        if point.z <= sys.float_info.epsilon:
            return ScreenPoint(0, 0)

        scale = SKELETON_TO_DEPTH_MULTIPLIER_320x240 / point.z
        x = (0.5 + point.x * scale / 320.0) * self.width
        y = (0.5 - point.y * scale / 240.0) * self.height
        return ScreenPoint(int(x), int(y))

    def map_depth_point_to_skeleton_point(self, x, y, depth_mm) -> SkeletonPoint:
        """Back-project a depth pixel (depth in millimetres) into sensor space"""
        z = depth_mm / 1000.0
        if z <= sys.float_info.epsilon:
            return SkeletonPoint()

        scale = z / SKELETON_TO_DEPTH_MULTIPLIER_320x240
        sx = (x / self.width - 0.5) * 320.0 * scale
        sy = (0.5 - y / self.height) * 240.0 * scale
        return SkeletonPoint(sx, sy, z)

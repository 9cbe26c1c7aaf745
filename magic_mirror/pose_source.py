"""
Builds Kinect-style skeletons from MediaPipe Pose landmarks and the
registered depth map.
"""

import logging
from typing import List, NamedTuple, Optional

import cv2
import numpy as np

from .coordinate_mapper import CoordinateMapper
from .skeleton import (
    LEG_JOINTS, FrameEdges, Joint, JointTrackingState, JointType,
    Skeleton, SkeletonPoint, SkeletonTrackingState,
)

logger = logging.getLogger(__name__)


class Landmark(NamedTuple):
    """Pose landmark in normalised image coordinates"""
    x: float
    y: float
    visibility: float


# MediaPipe PoseLandmark indices
NOSE = 0
LEFT_SHOULDER, RIGHT_SHOULDER = 11, 12
LEFT_ELBOW, RIGHT_ELBOW = 13, 14
LEFT_WRIST, RIGHT_WRIST = 15, 16
LEFT_PINKY, RIGHT_PINKY = 17, 18
LEFT_INDEX, RIGHT_INDEX = 19, 20
LEFT_HIP, RIGHT_HIP = 23, 24
LEFT_KNEE, RIGHT_KNEE = 25, 26
LEFT_ANKLE, RIGHT_ANKLE = 27, 28
LEFT_FOOT_INDEX, RIGHT_FOOT_INDEX = 31, 32

# Kinect joint -> weighted landmarks it is built from
JOINT_LANDMARKS = {
    JointType.HEAD: ((NOSE, 1.0),),
    JointType.SHOULDER_CENTER: ((LEFT_SHOULDER, 0.5), (RIGHT_SHOULDER, 0.5)),
    JointType.SPINE: ((LEFT_HIP, 0.375), (RIGHT_HIP, 0.375),
                      (LEFT_SHOULDER, 0.125), (RIGHT_SHOULDER, 0.125)),
    JointType.HIP_CENTER: ((LEFT_HIP, 0.5), (RIGHT_HIP, 0.5)),
    JointType.SHOULDER_LEFT: ((LEFT_SHOULDER, 1.0),),
    JointType.ELBOW_LEFT: ((LEFT_ELBOW, 1.0),),
    JointType.WRIST_LEFT: ((LEFT_WRIST, 1.0),),
    JointType.HAND_LEFT: ((LEFT_INDEX, 0.5), (LEFT_PINKY, 0.5)),
    JointType.SHOULDER_RIGHT: ((RIGHT_SHOULDER, 1.0),),
    JointType.ELBOW_RIGHT: ((RIGHT_ELBOW, 1.0),),
    JointType.WRIST_RIGHT: ((RIGHT_WRIST, 1.0),),
    JointType.HAND_RIGHT: ((RIGHT_INDEX, 0.5), (RIGHT_PINKY, 0.5)),
    JointType.HIP_LEFT: ((LEFT_HIP, 1.0),),
    JointType.KNEE_LEFT: ((LEFT_KNEE, 1.0),),
    JointType.ANKLE_LEFT: ((LEFT_ANKLE, 1.0),),
    JointType.FOOT_LEFT: ((LEFT_FOOT_INDEX, 1.0),),
    JointType.HIP_RIGHT: ((RIGHT_HIP, 1.0),),
    JointType.KNEE_RIGHT: ((RIGHT_KNEE, 1.0),),
    JointType.ANKLE_RIGHT: ((RIGHT_ANKLE, 1.0),),
    JointType.FOOT_RIGHT: ((RIGHT_FOOT_INDEX, 1.0),),
}

LANDMARK_COUNT = 33


class MediaPipePoseEstimator:
    """Single-person pose estimation on BGR frames"""

    def __init__(self, min_detection_confidence=0.7, min_tracking_confidence=0.5, model_complexity=1):
        try:
            import mediapipe as mp
        except ImportError as e:
            raise SystemExit("Missing 'mediapipe' Python module. Install it with: pip install 'magic-mirror[pose]'") from e

        self.pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            enable_segmentation=False,
            smooth_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def estimate(self, bgr) -> Optional[List[Landmark]]:
        results = self.pose.process(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))
        if not results or not results.pose_landmarks:
            return None

        return [Landmark(float(p.x), float(p.y), float(getattr(p, "visibility", 0.0) or 0.0))
                for p in results.pose_landmarks.landmark]

    def close(self):
        self.pose.close()


def sample_depth(depth_mm, x, y, radius=2):
    """Median of the valid (non-zero) depths around a pixel, or None"""
    h, w = depth_mm.shape[:2]
    xi, yi = int(x), int(y)
    if not (0 <= xi < w and 0 <= yi < h):
        return None

    window = depth_mm[max(0, yi - radius):yi + radius + 1, max(0, xi - radius):xi + radius + 1]
    valid = window[window > 0]
    if valid.size == 0:
        return None
    return float(np.median(valid))


def find_person_blob(depth_mm, depth_min, depth_max, min_area):
    """Centroid (x, y) of the largest person-sized blob in the depth band, or None"""
    mask = (depth_mm > depth_min) & (depth_mm < depth_max)
    mask = mask.astype(np.uint8) * 255

    # Clean up speckle before looking for contours
    kernel = np.ones((5, 5), np.uint8)
    mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel)
    mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, kernel)

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    if not contours:
        return None

    largest_contour = max(contours, key=cv2.contourArea)
    if cv2.contourArea(largest_contour) < min_area:
        return None

    M = cv2.moments(largest_contour)
    if M["m00"] == 0:
        return None
    return M["m10"] / M["m00"], M["m01"] / M["m00"]


class SkeletonBuilder:
    def __init__(self, mapper: CoordinateMapper, config):
        self.mapper = mapper
        self.config = config

    def joint_state(self, visibility) -> JointTrackingState:
        if visibility >= self.config.tracked_threshold:
            return JointTrackingState.TRACKED
        if visibility >= self.config.inferred_threshold:
            return JointTrackingState.INFERRED
        return JointTrackingState.NOT_TRACKED

    def build(self, landmarks, depth_mm) -> List[Skeleton]:
        skeleton = None
        if landmarks and len(landmarks) >= LANDMARK_COUNT:
            skeleton = self.skeleton_from_landmarks(landmarks, depth_mm)

        if skeleton is None:
            skeleton = self.skeleton_from_blob(depth_mm)

        return [skeleton] if skeleton is not None else []

    def skeleton_from_landmarks(self, landmarks, depth_mm) -> Optional[Skeleton]:
        h, w = depth_mm.shape[:2]

        # Pixel position, state and depth per joint
        samples = {}
        clipped = FrameEdges.NONE
        for joint_type, sources in JOINT_LANDMARKS.items():
            x = sum(landmarks[i].x * weight for i, weight in sources)
            y = sum(landmarks[i].y * weight for i, weight in sources)
            visibility = min(landmarks[i].visibility for i, _ in sources)
            state = self.joint_state(visibility)

            if self.config.seated_mode and joint_type in LEG_JOINTS:
                state = JointTrackingState.NOT_TRACKED

            if state != JointTrackingState.NOT_TRACKED:
                clipped |= _clipped_edges(x, y)

            px, py = x * w, y * h
            samples[joint_type] = (px, py, state, sample_depth(depth_mm, px, py))

        known = [d for _, _, state, d in samples.values()
                 if d is not None and state != JointTrackingState.NOT_TRACKED]
        if not known:
            logger.debug("Pose found but no joint has a depth reading")
            return None
        fallback_depth = float(np.median(known))

        joints = {}
        for joint_type, (px, py, state, depth) in samples.items():
            if depth is None:
                depth = fallback_depth
                if state == JointTrackingState.TRACKED:
                    state = JointTrackingState.INFERRED
            position = self.mapper.map_depth_point_to_skeleton_point(px, py, depth)
            joints[joint_type] = Joint(joint_type, position, state)

        if self.config.seated_mode:
            anchors = (JointType.HEAD, JointType.SHOULDER_CENTER)
        else:
            anchors = (JointType.SHOULDER_CENTER, JointType.HIP_CENTER)

        if all(joints[a].tracking_state != JointTrackingState.NOT_TRACKED for a in anchors):
            return Skeleton(
                tracking_id=1,
                tracking_state=SkeletonTrackingState.TRACKED,
                position=joints[anchors[1]].position,
                joints=joints,
                clipped_edges=clipped,
            )

        seen = [j.position for j in joints.values() if j.tracking_state != JointTrackingState.NOT_TRACKED]
        if not seen:
            return None
        root = SkeletonPoint(
            float(np.mean([p.x for p in seen])),
            float(np.mean([p.y for p in seen])),
            float(np.mean([p.z for p in seen])),
        )
        return Skeleton(1, SkeletonTrackingState.POSITION_ONLY, root, clipped_edges=clipped)

    def skeleton_from_blob(self, depth_mm) -> Optional[Skeleton]:
        centroid = find_person_blob(depth_mm, self.config.depth_min, self.config.depth_max,
                                    self.config.min_blob_area)
        if centroid is None:
            return None

        cx, cy = centroid
        depth = sample_depth(depth_mm, cx, cy, radius=5)
        if depth is None:
            return None

        root = self.mapper.map_depth_point_to_skeleton_point(cx, cy, depth)
        return Skeleton(1, SkeletonTrackingState.POSITION_ONLY, root)


def _clipped_edges(x, y) -> FrameEdges:
    edges = FrameEdges.NONE
    if x < 0.0:
        edges |= FrameEdges.LEFT
    elif x > 1.0:
        edges |= FrameEdges.RIGHT
    if y < 0.0:
        edges |= FrameEdges.TOP
    elif y > 1.0:
        edges |= FrameEdges.BOTTOM
    return edges

"""
Per-frame rendering: places the cartoon sprites over every tracked skeleton.
"""

from dataclasses import dataclass, field
from typing import List

import cv2
import numpy as np

from .coordinate_mapper import DEPTH_HEIGHT, DEPTH_WIDTH, ScreenPoint
from .segments import SEGMENTS, SegmentPlacement, place_segments
from .skeleton import FrameEdges, JointTrackingState, SkeletonTrackingState

RENDER_WIDTH = DEPTH_WIDTH
RENDER_HEIGHT = DEPTH_HEIGHT

# BGR
BACKGROUND_COLOR = (255, 255, 255)
CENTER_POINT_COLOR = (255, 0, 0)
CLIP_EDGE_COLOR = (0, 0, 255)
TRACKED_JOINT_COLOR = (68, 192, 68)
INFERRED_JOINT_COLOR = (0, 255, 255)
TRACKED_BONE_COLOR = (0, 128, 0)
INFERRED_BONE_COLOR = (128, 128, 128)

BODY_CENTER_THICKNESS = 10
CLIP_BOUNDS_THICKNESS = 10
JOINT_THICKNESS = 6
TRACKED_BONE_THICKNESS = 6
INFERRED_BONE_THICKNESS = 1


@dataclass
class RenderPass:
    canvas: np.ndarray
    placements: List[SegmentPlacement] = field(default_factory=list)
    markers: List[ScreenPoint] = field(default_factory=list)


class MirrorRenderer:
    def __init__(self, sprites, config, segments=SEGMENTS):
        self.sprites = sprites
        self.config = config
        self.segments = segments
        self.last_pass = None

    def new_canvas(self, frame):
        canvas = np.full((RENDER_HEIGHT, RENDER_WIDTH, 3), BACKGROUND_COLOR, dtype=np.uint8)

        color = frame.color_image
        if color is not None and self.config.video_opacity > 0:
            if color.shape[:2] != (RENDER_HEIGHT, RENDER_WIDTH):
                color = cv2.resize(color, (RENDER_WIDTH, RENDER_HEIGHT))
            # Fade the video towards black
            canvas = cv2.addWeighted(color, self.config.video_opacity,
                                     np.zeros_like(color), 1 - self.config.video_opacity, 0)
        return canvas

    def handle_frame(self, frame, mapper) -> RenderPass:
        """Render one skeleton frame; mapper projects skeleton points to the canvas"""
        render = RenderPass(self.new_canvas(frame))
        self.sprites.hide_all()

        for skeleton in frame.skeletons:
            if self.config.show_clipped_edges:
                draw_clipped_edges(render.canvas, skeleton.clipped_edges)

            if skeleton.tracking_state == SkeletonTrackingState.TRACKED:
                for placement in place_segments(skeleton, mapper, self.segments):
                    self.apply_placement(placement)
                    render.placements.append(placement)

            elif skeleton.tracking_state == SkeletonTrackingState.POSITION_ONLY:
                center = mapper.map_skeleton_point_to_depth_point(skeleton.position)
                cv2.circle(render.canvas, center, BODY_CENTER_THICKNESS, CENTER_POINT_COLOR, -1)
                render.markers.append(center)

        self.sprites.draw_onto(render.canvas, self.config.sprite_alpha)

        if self.config.show_bones:
            draw_bones(render.canvas, render.placements)
        if self.config.show_joints:
            for skeleton in frame.skeletons:
                if skeleton.tracking_state == SkeletonTrackingState.TRACKED:
                    draw_joints(render.canvas, skeleton, mapper)

        self.last_pass = render
        return render

    def apply_placement(self, placement):
        name = placement.segment.name
        if name in self.sprites:
            self.sprites[name].place(placement.left, placement.top, placement.angle)


def draw_clipped_edges(canvas, edges):
    """Red bars along the frame edges that cut the skeleton off"""
    if edges & FrameEdges.BOTTOM:
        cv2.rectangle(canvas, (0, RENDER_HEIGHT - CLIP_BOUNDS_THICKNESS),
                      (RENDER_WIDTH - 1, RENDER_HEIGHT - 1), CLIP_EDGE_COLOR, -1)
    if edges & FrameEdges.TOP:
        cv2.rectangle(canvas, (0, 0), (RENDER_WIDTH - 1, CLIP_BOUNDS_THICKNESS - 1), CLIP_EDGE_COLOR, -1)
    if edges & FrameEdges.LEFT:
        cv2.rectangle(canvas, (0, 0), (CLIP_BOUNDS_THICKNESS - 1, RENDER_HEIGHT - 1), CLIP_EDGE_COLOR, -1)
    if edges & FrameEdges.RIGHT:
        cv2.rectangle(canvas, (RENDER_WIDTH - CLIP_BOUNDS_THICKNESS, 0),
                      (RENDER_WIDTH - 1, RENDER_HEIGHT - 1), CLIP_EDGE_COLOR, -1)
    return canvas


def draw_bones(canvas, placements):
    # Bones are drawn as inferred unless both joints are tracked
    for placement in placements:
        if placement.tracked:
            color, thickness = TRACKED_BONE_COLOR, TRACKED_BONE_THICKNESS
        else:
            color, thickness = INFERRED_BONE_COLOR, INFERRED_BONE_THICKNESS
        cv2.line(canvas, placement.origin, placement.destination, color, thickness)
    return canvas


def draw_joints(canvas, skeleton, mapper):
    for joint in skeleton.joints.values():
        if joint.tracking_state == JointTrackingState.TRACKED:
            color = TRACKED_JOINT_COLOR
        elif joint.tracking_state == JointTrackingState.INFERRED:
            color = INFERRED_JOINT_COLOR
        else:
            continue
        point = mapper.map_skeleton_point_to_depth_point(joint.position)
        cv2.circle(canvas, point, JOINT_THICKNESS, color, -1)
    return canvas

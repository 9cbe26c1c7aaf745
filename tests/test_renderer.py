import numpy as np
import pytest

from conftest import make_skeleton
from magic_mirror.config import MirrorConfig
from magic_mirror.renderer import CENTER_POINT_COLOR, CLIP_EDGE_COLOR, MirrorRenderer
from magic_mirror.segments import SEGMENTS, SEGMENTS_BY_NAME
from magic_mirror.skeleton import (
    FrameEdges, JointTrackingState, Skeleton, SkeletonFrame, SkeletonTrackingState,
)
from magic_mirror.sprites import SpriteSet

INFERRED = JointTrackingState.INFERRED
NOT_TRACKED = JointTrackingState.NOT_TRACKED


@pytest.fixture(scope="module")
def sprites():
    return SpriteSet.load()


@pytest.fixture
def renderer(sprites, config):
    return MirrorRenderer(sprites, config)


def frame_of(*skeletons, color=None):
    return SkeletonFrame(1, 0.0, list(skeletons), color)


def test_empty_frame_is_plain_white(renderer, mapper):
    render = renderer.handle_frame(frame_of(), mapper)
    assert render.canvas.shape == (480, 640, 3)
    assert (render.canvas == 255).all()
    assert render.placements == []
    assert render.markers == []


def test_tracked_skeleton_shows_every_segment(renderer, sprites, mapper):
    render = renderer.handle_frame(frame_of(make_skeleton()), mapper)

    assert len(render.placements) == len(SEGMENTS)
    assert render.markers == []
    assert len(sprites.visible_layers()) == len(SEGMENTS)

    head = render.placements[0]
    assert sprites["head"].left == head.left
    assert sprites["head"].top == head.top
    assert sprites["head"].angle == head.angle
    assert not (render.canvas == 255).all()


@pytest.mark.parametrize("name", ["head", "forearm_right", "foot_left"])
def test_both_inferred_keeps_sprite_hidden(renderer, sprites, mapper, name):
    segment = SEGMENTS_BY_NAME[name]
    skeleton = make_skeleton(overrides={segment.origin: INFERRED, segment.destination: INFERRED})
    render = renderer.handle_frame(frame_of(skeleton), mapper)

    assert not sprites[name].visible
    assert name not in [p.segment.name for p in render.placements]


def test_untracked_joint_hides_both_neighbours(renderer, sprites, mapper):
    skeleton = make_skeleton(overrides={SEGMENTS_BY_NAME["forearm_left"].origin: NOT_TRACKED})
    renderer.handle_frame(frame_of(skeleton), mapper)

    # elbow ends the upper arm and starts the forearm
    assert not sprites["upper_arm_left"].visible
    assert not sprites["forearm_left"].visible
    assert sprites["hand_left"].visible


def test_position_only_draws_one_marker(renderer, sprites, mapper, root_point):
    skeleton = Skeleton(2, SkeletonTrackingState.POSITION_ONLY, root_point)
    render = renderer.handle_frame(frame_of(skeleton), mapper)

    expected = mapper.map_skeleton_point_to_depth_point(root_point)
    assert render.markers == [expected]
    assert render.placements == []
    assert sprites.visible_layers() == []
    assert tuple(render.canvas[expected.y, expected.x]) == CENTER_POINT_COLOR


def test_untracked_skeleton_draws_nothing(renderer, mapper, root_point):
    skeleton = Skeleton(3, SkeletonTrackingState.NOT_TRACKED, root_point)
    render = renderer.handle_frame(frame_of(skeleton), mapper)
    assert (render.canvas == 255).all()


def test_sprites_are_reset_every_frame(renderer, sprites, mapper):
    renderer.handle_frame(frame_of(make_skeleton()), mapper)
    assert sprites.visible_layers()

    renderer.handle_frame(frame_of(), mapper)
    assert sprites.visible_layers() == []


def test_clipped_edges_draw_red_bars(renderer, mapper, root_point):
    skeleton = Skeleton(2, SkeletonTrackingState.POSITION_ONLY, root_point,
                        clipped_edges=FrameEdges.BOTTOM | FrameEdges.LEFT)
    render = renderer.handle_frame(frame_of(skeleton), mapper)

    assert tuple(render.canvas[475, 320]) == CLIP_EDGE_COLOR
    assert tuple(render.canvas[240, 5]) == CLIP_EDGE_COLOR
    assert tuple(render.canvas[5, 320]) == (255, 255, 255)
    assert tuple(render.canvas[240, 635]) == (255, 255, 255)


def test_clipped_edges_can_be_switched_off(sprites, mapper, root_point):
    renderer = MirrorRenderer(sprites, MirrorConfig(show_clipped_edges=False))
    skeleton = Skeleton(2, SkeletonTrackingState.POSITION_ONLY, root_point, clipped_edges=FrameEdges.TOP)
    render = renderer.handle_frame(frame_of(skeleton), mapper)
    assert tuple(render.canvas[5, 5]) == (255, 255, 255)


def test_video_backdrop_is_faded(sprites, mapper):
    renderer = MirrorRenderer(sprites, MirrorConfig(video_opacity=0.5))
    color = np.full((480, 640, 3), 200, dtype=np.uint8)
    render = renderer.handle_frame(frame_of(color=color), mapper)
    assert tuple(render.canvas[10, 10]) == (100, 100, 100)


def test_video_backdrop_ignored_when_opacity_zero(renderer, mapper):
    color = np.zeros((480, 640, 3), dtype=np.uint8)
    render = renderer.handle_frame(frame_of(color=color), mapper)
    assert (render.canvas == 255).all()


def test_debug_overlays(sprites, mapper):
    renderer = MirrorRenderer(sprites, MirrorConfig(show_bones=True, show_joints=True, sprite_alpha=0.0))
    skeleton = make_skeleton()
    render = renderer.handle_frame(frame_of(skeleton), mapper)

    head = render.placements[0]
    # joint dot painted over the head joint
    assert tuple(render.canvas[head.origin.y, head.origin.x]) == (68, 192, 68)
    assert renderer.last_pass is render

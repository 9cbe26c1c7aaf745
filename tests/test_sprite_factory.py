import os

from magic_mirror.segments import SEGMENTS
from magic_mirror.sprite_factory import SPRITE_STYLES, create_sprite, create_sprite_set, main, save_sprite_set


def test_every_segment_has_a_style():
    assert set(SPRITE_STYLES) == {segment.name for segment in SEGMENTS}


def test_sprite_is_transparent_outside_the_shape():
    img = create_sprite("upper_arm_left")
    assert img.mode == "RGBA"
    assert img.size == SPRITE_STYLES["upper_arm_left"][:2]
    assert img.getpixel((0, 0))[3] == 0

    width, height = img.size
    assert img.getpixel((width // 2, height // 2))[3] == 255


def test_head_has_a_face():
    img = create_sprite("head")
    width, height = img.size
    left_eye = img.getpixel((width // 3, height * 2 // 5))
    assert left_eye[:3] != SPRITE_STYLES["head"][2][:3]


def test_create_sprite_set():
    assert set(create_sprite_set()) == {segment.name for segment in SEGMENTS}


def test_save_sprite_set(tmp_path):
    paths = save_sprite_set(str(tmp_path / "sprites"))
    assert len(paths) == len(SEGMENTS)
    for segment in SEGMENTS:
        assert os.path.exists(tmp_path / "sprites" / segment.sprite)


def test_cli_writes_to_given_directory(tmp_path):
    assert main([str(tmp_path)]) == 0
    assert os.path.exists(tmp_path / "head.png")

from magic_mirror.config import MirrorConfig


def test_defaults():
    config = MirrorConfig()
    assert config.mirror
    assert not config.seated_mode
    assert config.sprite_dir is None
    assert config.inferred_threshold < config.tracked_threshold


def test_from_env(monkeypatch):
    monkeypatch.setenv("MAGIC_MIRROR_DEVICE", "1")
    monkeypatch.setenv("MAGIC_MIRROR_MIRROR", "false")
    monkeypatch.setenv("MAGIC_MIRROR_SEATED", "yes")
    monkeypatch.setenv("MAGIC_MIRROR_SPRITES", "/tmp/sprites")
    monkeypatch.setenv("MAGIC_MIRROR_VIDEO_OPACITY", "0.4")

    config = MirrorConfig.from_env()
    assert config.device_index == 1
    assert not config.mirror
    assert config.seated_mode
    assert config.sprite_dir == "/tmp/sprites"
    assert config.video_opacity == 0.4


def test_bad_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("MAGIC_MIRROR_DEVICE", "usb")
    monkeypatch.setenv("MAGIC_MIRROR_MIRROR", "maybe")
    monkeypatch.setenv("MAGIC_MIRROR_TRACKED_THRESHOLD", "high")

    config = MirrorConfig.from_env()
    assert config.device_index == 0
    assert config.mirror
    assert config.tracked_threshold == 0.65


def test_opacity_and_alpha_are_clamped(monkeypatch):
    monkeypatch.setenv("MAGIC_MIRROR_VIDEO_OPACITY", "3")
    monkeypatch.setenv("MAGIC_MIRROR_SPRITE_ALPHA", "-1")

    config = MirrorConfig.from_env()
    assert config.video_opacity == 1.0
    assert config.sprite_alpha == 0.0

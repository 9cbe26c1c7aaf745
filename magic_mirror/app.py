#!/usr/bin/env python3
"""
Magic Mirror
Tracks the person in front of the Kinect and dresses their limbs with a
cartoon character's sprites, so the character copies their pose.
"""

import argparse
import logging
import sys
import time

import cv2
import numpy as np

from .config import MirrorConfig
from .renderer import RENDER_HEIGHT, RENDER_WIDTH, MirrorRenderer
from .sensor import FreenectDevice, KinectSensor, SensorStartError, discover_devices
from .sprites import SpriteSet

logger = logging.getLogger(__name__)

NO_KINECT_READY = "No ready Kinect found!"
CONTROL_PANEL = 'Control Panel'
STATUS_BAR_HEIGHT = 30


class MagicMirrorApp:
    def __init__(self, config, sensor_factory=None):
        self.config = config
        self.sensor_factory = sensor_factory or KinectSensor.first_connected
        self.sensor = None
        self.status_text = ""

        self.sprites = SpriteSet.load(config.sprite_dir)
        self.renderer = MirrorRenderer(self.sprites, config)
        self.output = self.blank_canvas()

    def blank_canvas(self):
        return np.full((RENDER_HEIGHT, RENDER_WIDTH, 3), 255, dtype=np.uint8)

    def open_sensor(self):
        """Start the first connected Kinect, falling back to the status message"""
        sensor = self.sensor_factory(self.config)

        if sensor is not None:
            sensor.enable_skeleton_stream()
            sensor.on_skeleton_frame(self.sensor_skeleton_frame_ready)
            try:
                sensor.start()
            except SensorStartError as e:
                logger.warning("%s", e)
                sensor.close()
                sensor = None

        self.sensor = sensor
        if self.sensor is None:
            self.status_text = NO_KINECT_READY
        return self.sensor

    def close_sensor(self):
        if self.sensor is not None:
            self.sensor.stop()

    def sensor_skeleton_frame_ready(self, frame):
        render = self.renderer.handle_frame(frame, self.sensor.coordinate_mapper)
        self.output = render.canvas

    def compose_window(self):
        """The render canvas with the status bar underneath"""
        bar = np.full((STATUS_BAR_HEIGHT, RENDER_WIDTH, 3), 240, dtype=np.uint8)
        if self.status_text:
            cv2.putText(bar, self.status_text, (10, 21), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 0), 1)
        return np.vstack([self.output, bar])

    def setup_control_panel(self):
        """Create a control panel with trackbars for real-time adjustment"""
        cv2.namedWindow(CONTROL_PANEL, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(CONTROL_PANEL, 400, 250)

        cv2.createTrackbar('Sprite Alpha', CONTROL_PANEL, int(self.config.sprite_alpha * 100), 100, self.update_sprite_alpha)
        cv2.createTrackbar('Video Opacity', CONTROL_PANEL, int(self.config.video_opacity * 100), 100, self.update_video_opacity)
        cv2.createTrackbar('Show Bones', CONTROL_PANEL, int(self.config.show_bones), 1, self.toggle_bones)
        cv2.createTrackbar('Show Joints', CONTROL_PANEL, int(self.config.show_joints), 1, self.toggle_joints)
        cv2.createTrackbar('Seated Mode', CONTROL_PANEL, int(self.config.seated_mode), 1, self.toggle_seated)

    def update_sprite_alpha(self, val):
        self.config.sprite_alpha = val / 100.0

    def update_video_opacity(self, val):
        self.config.video_opacity = val / 100.0

    def toggle_bones(self, val):
        self.config.show_bones = bool(val)

    def toggle_joints(self, val):
        self.config.show_joints = bool(val)

    def toggle_seated(self, val):
        self.config.seated_mode = bool(val)
        logger.info("Seated mode %s", "enabled" if self.config.seated_mode else "disabled")

    def save_frame(self):
        filename = f"magic_mirror_{int(time.time() * 1000)}.png"
        cv2.imwrite(filename, self.output)
        print(f"Saved {filename}")
        return filename

    def run(self):
        print("🪞 Magic Mirror")
        print("Use the Control Panel to adjust settings in real-time!")
        print("Press 'q' to quit, 's' to save a frame")

        cv2.namedWindow(self.config.window_name, cv2.WINDOW_AUTOSIZE)
        self.setup_control_panel()

        if self.open_sensor() is None:
            print(f"⚠️  {NO_KINECT_READY}")
        else:
            print("✅ Kinect started")

        try:
            while True:
                if self.sensor is not None:
                    self.sensor.poll()

                cv2.imshow(self.config.window_name, self.compose_window())

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                elif key == ord('s'):
                    self.save_frame()
        except KeyboardInterrupt:
            print("\n🛑 Interrupted by user")
        finally:
            print("🔄 Stopping Kinect...")
            self.close_sensor()
            cv2.destroyAllWindows()


def check_device():
    """Print whether a Kinect is attached and streaming; returns an exit code"""
    print("🔍 Checking Kinect device...")
    count = discover_devices()
    print(f"   Found {count} device(s)")
    if count == 0:
        print("❌ No Kinect connected")
        return 1

    config = MirrorConfig.from_env()
    if count <= config.device_index:
        print(f"❌ No Kinect at index {config.device_index}")
        return 1
    sensor = KinectSensor(FreenectDevice(config.device_index), None, config)

    try:
        sensor.start()
    except SensorStartError as e:
        print(f"❌ {e}")
        print("This usually means:")
        print("1. Kinect is not powered on")
        print("2. USB permission issues")
        print("3. Another process is using the Kinect")
        sensor.close()
        return 1

    try:
        depth = sensor.device.read_depth()
        if depth is None:
            print("❌ Depth stream stopped after start")
            return 1
        print("✅ Depth data received!")
        print(f"   Shape: {depth.shape}")
        print(f"   Range: {depth.min()} - {depth.max()} mm")
    finally:
        sensor.stop()
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="magic-mirror", description="Cartoon magic mirror for the Kinect")
    parser.add_argument("--sprites", dest="sprite_dir", help="directory holding one PNG per body segment")
    parser.add_argument("--device", dest="device_index", type=int, help="Kinect index")
    parser.add_argument("--no-mirror", action="store_true", help="don't flip the feeds horizontally")
    parser.add_argument("--seated", action="store_true", help="track the upper body only")
    parser.add_argument("--show-bones", action="store_true")
    parser.add_argument("--show-joints", action="store_true")
    parser.add_argument("--video-opacity", type=float, help="0..1, blend the colour feed behind the sprites")
    parser.add_argument("--sprite-alpha", type=float, help="0..1")
    parser.add_argument("--check-device", action="store_true", help="probe the Kinect and exit")
    parser.add_argument("--log-level", default="INFO")
    return parser


def config_from_args(args, config=None):
    """Apply command line overrides on top of the environment config"""
    config = config or MirrorConfig.from_env()
    if args.sprite_dir is not None:
        config.sprite_dir = args.sprite_dir
    if args.device_index is not None:
        config.device_index = args.device_index
    if args.no_mirror:
        config.mirror = False
    if args.seated:
        config.seated_mode = True
    if args.show_bones:
        config.show_bones = True
    if args.show_joints:
        config.show_joints = True
    if args.video_opacity is not None:
        config.video_opacity = max(0.0, min(1.0, args.video_opacity))
    if args.sprite_alpha is not None:
        config.sprite_alpha = max(0.0, min(1.0, args.sprite_alpha))
    return config


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.check_device:
        return check_device()

    app = MagicMirrorApp(config_from_args(args))
    try:
        app.run()
    except Exception as e:
        print(f"❌ Error occurred: {e}")
        import traceback
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

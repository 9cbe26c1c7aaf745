"""
Kinect sensor adapter.
Reads registered depth and colour frames through the libfreenect sync
wrapper, runs pose estimation on them and hands skeleton frames to the
subscribed handlers.
"""

import logging
import time

import cv2

from .coordinate_mapper import CoordinateMapper
from .pose_source import SkeletonBuilder
from .skeleton import SkeletonFrame

logger = logging.getLogger(__name__)


def _import_freenect():
    try:
        import freenect
    except ImportError as e:
        raise SystemExit("Missing 'freenect' Python module. Build/install libfreenect with Python bindings.") from e
    return freenect


class SensorStartError(IOError):
    """The sensor is attached but would not start streaming"""


def discover_devices():
    """Number of Kinects attached to the machine"""
    freenect = _import_freenect()
    ctx = freenect.init()
    try:
        return freenect.num_devices(ctx)
    finally:
        freenect.shutdown(ctx)


class FreenectDevice:
    """One Kinect read through freenect's synchronous API"""

    def __init__(self, index=0):
        self.freenect = _import_freenect()
        self.index = index

    def read_depth(self):
        """Depth in millimetres registered to the colour camera, or None"""
        result = self.freenect.sync_get_depth(self.index, format=self.freenect.DEPTH_REGISTERED)
        if result is None:
            return None
        depth, _ = result
        return depth

    def read_video(self):
        """Colour frame as BGR, or None"""
        result = self.freenect.sync_get_video(self.index, format=self.freenect.VIDEO_RGB)
        if result is None:
            return None
        rgb, _ = result
        if rgb is None:
            return None
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

    def stop(self):
        self.freenect.sync_stop()


class KinectSensor:
    """
    Frame source with the lifecycle of the Kinect SDK sensor object:
    enable the skeleton stream, subscribe to frames, start, poll, stop.
    """

    def __init__(self, device, pose_estimator, config, mapper=None):
        self.device = device
        self.pose_estimator = pose_estimator
        self.config = config
        self.coordinate_mapper = mapper or CoordinateMapper()
        self.skeleton_builder = SkeletonBuilder(self.coordinate_mapper, config)

        self.skeleton_stream_enabled = False
        self.is_running = False
        self.is_closed = False
        self.frame_number = 0
        self._handlers = []

    @classmethod
    def first_connected(cls, config, pose_estimator_factory=None):
        """The sensor at config.device_index, or None when no Kinect is attached"""
        count = discover_devices()
        if count <= config.device_index:
            logger.info("Found %d Kinect device(s), none at index %d", count, config.device_index)
            return None

        if pose_estimator_factory is None:
            from .pose_source import MediaPipePoseEstimator
            pose_estimator_factory = MediaPipePoseEstimator

        return cls(FreenectDevice(config.device_index), pose_estimator_factory(), config)

    def enable_skeleton_stream(self):
        self.skeleton_stream_enabled = True

    def disable_skeleton_stream(self):
        self.skeleton_stream_enabled = False

    def on_skeleton_frame(self, handler):
        """Register a callable invoked with every SkeletonFrame"""
        self._handlers.append(handler)
        return handler

    def start(self):
        try:
            depth = self.device.read_depth()
        except Exception as e:
            raise SensorStartError(f"Kinect {self.config.device_index} failed to start: {e}") from e

        if depth is None:
            raise SensorStartError(f"Kinect {self.config.device_index} returned no depth data (busy or unplugged?)")

        self.is_running = True
        logger.info("Kinect %d started", self.config.device_index)

    def stop(self):
        if not self.is_running:
            return
        self.is_running = False
        self.close()
        logger.info("Kinect %d stopped", self.config.device_index)

    def close(self):
        """Release the device and the pose estimator, started or not"""
        if self.is_closed:
            return
        self.is_closed = True
        self.is_running = False
        self.device.stop()
        close = getattr(self.pose_estimator, "close", None)
        if close is not None:
            close()

    def read_frame(self):
        """Grab and process one frame; None when the device has nothing to give"""
        depth = self.device.read_depth()
        color = self.device.read_video()
        if depth is None or color is None:
            return None

        if self.config.mirror:
            depth = cv2.flip(depth, 1)
            color = cv2.flip(color, 1)

        landmarks = self.pose_estimator.estimate(color)
        skeletons = self.skeleton_builder.build(landmarks, depth)

        self.frame_number += 1
        return SkeletonFrame(self.frame_number, time.time(), skeletons, color)

    def poll(self):
        """Deliver one frame to the handlers, returning it"""
        if not (self.is_running and self.skeleton_stream_enabled):
            return None

        frame = self.read_frame()
        if frame is None:
            return None

        for handler in self._handlers:
            handler(frame)
        return frame

"""
Sprite layers drawn over the mirror canvas, one per body segment.
"""

import logging
import os

import cv2
import numpy as np

from .segments import SEGMENTS
from .sprite_factory import create_sprite

logger = logging.getLogger(__name__)


def load_sprite(sprite_path):
    """Load a sprite image as BGRA, or None when it can't be read"""
    if not os.path.exists(sprite_path):
        logger.info("Sprite not found: %s", sprite_path)
        return None

    image = cv2.imread(sprite_path, cv2.IMREAD_UNCHANGED)
    if image is None:
        logger.warning("Failed to load sprite: %s", sprite_path)
        return None

    if image.ndim == 2:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    elif image.shape[2] == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)

    logger.debug("Sprite loaded: %s", sprite_path)
    return image


def pil_to_bgra(img):
    return cv2.cvtColor(np.array(img.convert('RGBA')), cv2.COLOR_RGBA2BGRA)


class SpriteLayer:
    """
    A sprite image plus where it sits on the canvas.
    Rotation is about the sprite's top-left corner, which is pinned at
    (left, top).
    """

    def __init__(self, name, image):
        self.name = name
        self.image = image
        self.visible = False
        self.left = 0
        self.top = 0
        self.angle = 0.0

    @property
    def size(self):
        h, w = self.image.shape[:2]
        return w, h

    def place(self, left, top, angle):
        self.visible = True
        self.left = left
        self.top = top
        self.angle = angle

    def hide(self):
        self.visible = False

    def draw_onto(self, canvas, alpha=1.0):
        """Alpha-blend the rotated sprite into a BGR canvas in place"""
        if not self.visible or alpha <= 0:
            return canvas

        canvas_h, canvas_w = canvas.shape[:2]

        # Positive angles turn clockwise on screen, cv2 turns counter-clockwise
        matrix = cv2.getRotationMatrix2D((0, 0), -self.angle, 1.0)
        matrix[0, 2] += self.left
        matrix[1, 2] += self.top

        warped = cv2.warpAffine(
            self.image, matrix, (canvas_w, canvas_h),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )

        weight = (warped[:, :, 3:4].astype(np.float32) / 255.0) * alpha
        if not weight.any():
            return canvas

        blended = canvas.astype(np.float32) * (1.0 - weight) + warped[:, :, :3].astype(np.float32) * weight
        canvas[:] = blended.astype(np.uint8)
        return canvas


class SpriteSet:
    """Sprite layers keyed by segment name"""

    def __init__(self, layers):
        self.layers = dict(layers)

    def __getitem__(self, name):
        return self.layers[name]

    def __contains__(self, name):
        return name in self.layers

    def __iter__(self):
        return iter(self.layers.values())

    def __len__(self):
        return len(self.layers)

    def hide_all(self):
        for layer in self.layers.values():
            layer.hide()

    def visible_layers(self):
        return [layer for layer in self.layers.values() if layer.visible]

    def draw_onto(self, canvas, alpha=1.0):
        for layer in self.layers.values():
            layer.draw_onto(canvas, alpha)
        return canvas

    @classmethod
    def load(cls, sprite_dir=None, segments=SEGMENTS):
        """
        Load each segment's sprite from sprite_dir, falling back to the
        generated placeholder when the file is missing or unreadable.
        """
        layers = {}
        placeholders = []
        for segment in segments:
            image = None
            if sprite_dir:
                image = load_sprite(os.path.join(sprite_dir, segment.sprite))
            if image is None:
                image = pil_to_bgra(create_sprite(segment.name))
                placeholders.append(segment.name)
            layers[segment.name] = SpriteLayer(segment.name, image)

        if placeholders:
            logger.info("Using placeholder sprites for: %s", ", ".join(placeholders))
        return cls(layers)

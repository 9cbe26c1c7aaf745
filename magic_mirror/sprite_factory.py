#!/usr/bin/env python3
"""
Placeholder cartoon sprites, one per body segment.
Every sprite is drawn pointing down (origin joint at the top edge), which is
the orientation the renderer's rotation angle assumes.
"""

import os
import sys

from PIL import Image, ImageDraw

from .segments import SEGMENTS

OUTLINE = (40, 30, 60, 255)
SKIN = (255, 214, 170, 255)
SHIRT = (90, 160, 230, 255)
PANTS = (70, 70, 140, 255)
SHOE = (150, 60, 40, 255)

# segment name -> (width, height, fill)
SPRITE_STYLES = {
    "head": (60, 64, SKIN),
    "torso": (64, 90, SHIRT),
    "hip": (64, 44, PANTS),
    "upper_arm_left": (24, 70, SHIRT),
    "forearm_left": (20, 62, SKIN),
    "hand_left": (26, 30, SKIN),
    "upper_arm_right": (24, 70, SHIRT),
    "forearm_right": (20, 62, SKIN),
    "hand_right": (26, 30, SKIN),
    "thigh_left": (30, 82, PANTS),
    "shin_left": (26, 74, PANTS),
    "foot_left": (32, 26, SHOE),
    "thigh_right": (30, 82, PANTS),
    "shin_right": (26, 74, PANTS),
    "foot_right": (32, 26, SHOE),
}


def create_sprite(name):
    """Draw the placeholder for one segment as an RGBA image"""
    width, height, fill = SPRITE_STYLES[name]
    img = Image.new('RGBA', (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    box = (1, 1, width - 2, height - 2)
    if name == "head":
        draw.ellipse(box, fill=fill, outline=OUTLINE, width=3)

        # Eyes and a smile
        eye_y = height * 2 // 5
        for eye_x in (width // 3, width * 2 // 3):
            draw.ellipse((eye_x - 4, eye_y - 5, eye_x + 4, eye_y + 5), fill=OUTLINE)
        draw.arc((width // 4, height // 3, width * 3 // 4, height * 4 // 5),
                 start=20, end=160, fill=OUTLINE, width=3)
    else:
        radius = min(width, height) // 2 - 1
        draw.rounded_rectangle(box, radius=radius, fill=fill, outline=OUTLINE, width=3)

    return img


def create_sprite_set():
    return {segment.name: create_sprite(segment.name) for segment in SEGMENTS}


def save_sprite_set(directory):
    """Write every placeholder to <directory>/<segment sprite file>"""
    os.makedirs(directory, exist_ok=True)
    paths = []
    for segment in SEGMENTS:
        path = os.path.join(directory, segment.sprite)
        create_sprite(segment.name).save(path)
        paths.append(path)
        print(f"Created {segment.sprite}")
    return paths


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    directory = argv[0] if argv else "sprites"
    save_sprite_set(directory)
    print(f"Placeholder sprites written to {directory}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

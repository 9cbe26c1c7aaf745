import math


def angle_from_points(origin, destination) -> float:
    """
    Rotation in degrees that lines a downward-pointing sprite up with the
    origin -> destination direction. fmod keeps the sign of the dividend, so
    the result lies in (-360, 0].
    """
    dy = origin[1] - destination[1]
    dx = origin[0] - destination[0]

    theta = math.atan2(dy, dx)
    return math.fmod(-270.0 + math.degrees(theta), 360.0)

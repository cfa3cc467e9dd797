"""
Easing curves for phase-to-phase parameter interpolation.

Parameters move toward the next phase's values over the closing part of
each phase instead of stepping at the boundary. The phase controller
shapes the blend weight with smooth_ease; shapers then interpolate
their tables linearly by that weight.
"""


def smooth_ease(t: float) -> float:
    """Smooth ease-out cubic curve.

    Args:
        t: Progress value from 0.0 to 1.0

    Returns:
        Eased value from 0.0 to 1.0
    """
    if t >= 1.0:
        return 1.0
    if t <= 0.0:
        return 0.0
    return 1.0 - (1.0 - t) ** 3


def ease_parameter(current: float, target: float, weight: float) -> float:
    """
    Interpolate a parameter by an already-eased weight.

    Args:
        current: Value at weight 0
        target: Value at weight 1
        weight: Blend weight, clamped to [0, 1]

    Returns:
        Interpolated parameter value
    """
    weight = min(max(weight, 0.0), 1.0)
    return current + (target - current) * weight

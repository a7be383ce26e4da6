"""
Parameter Tweening
==================
Smooth transitions between two parameter sets, advanced one frame at a time
by the host render loop.

Why is this file needed?
------------------------
1. Explicit stepping: The frame loop calls `step(dt)`; nothing here schedules
   itself, so there is no hidden recursion to outlive its owner.
2. Cancellation: Every tween carries a token. Starting a new tween or editing
   a parameter by hand cancels the token of the running one, so animations
   supersede each other instead of queueing.

Classes:
    CancellationToken: Cooperative cancel flag.
    ParameterTween: One eased transition.
    AnimationDriver: Owns at most one running tween.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Optional

from trefoil.config import TWEEN_DURATION_S
from trefoil.model.parameters import ShapeParameters

logger = logging.getLogger(__name__)


def ease_in_out_cubic(x: float) -> float:
    x = min(1.0, max(0.0, x))
    if x < 0.5:
        return 4.0 * x * x * x
    return 1.0 - (-2.0 * x + 2.0) ** 3 / 2.0


@dataclass
class CancellationToken:
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ParameterTween:
    start: ShapeParameters
    end: ShapeParameters
    duration: float = TWEEN_DURATION_S
    easing: Callable[[float], float] = ease_in_out_cubic
    token: CancellationToken = field(default_factory=CancellationToken)
    elapsed: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration <= 0.0:
            return 1.0
        return min(1.0, self.elapsed / self.duration)

    @property
    def finished(self) -> bool:
        return self.token.cancelled or self.progress >= 1.0

    def step(self, dt: float) -> Optional[ShapeParameters]:
        """
        Advance by `dt` seconds.

        Returns:
            The interpolated parameters, or None if the tween was cancelled.
        """
        if self.token.cancelled:
            return None
        self.elapsed += max(0.0, dt)
        return self.start.lerp(self.end, self.easing(self.progress)).sanitized()


class AnimationDriver:
    """Runs at most one tween at a time; a new one replaces the old one."""

    def __init__(self) -> None:
        self._tween: Optional[ParameterTween] = None

    @property
    def active(self) -> bool:
        return self._tween is not None and not self._tween.finished

    @property
    def current(self) -> Optional[ParameterTween]:
        return self._tween

    def start(
        self,
        start: ShapeParameters,
        end: ShapeParameters,
        duration: float = TWEEN_DURATION_S
    ) -> CancellationToken:
        self.cancel()
        self._tween = ParameterTween(start=start.sanitized(), end=end.sanitized(), duration=duration)
        logger.debug(f"Tween started ({duration:.2f} s).")
        return self._tween.token

    def cancel(self) -> None:
        if self._tween is not None and not self._tween.finished:
            self._tween.token.cancel()
            logger.debug("Running tween cancelled.")
        self._tween = None

    def step(self, dt: float) -> Optional[ShapeParameters]:
        """Per-frame step; returns the parameters to apply, or None when idle."""
        if self._tween is None:
            return None
        params = self._tween.step(dt)
        if self._tween.finished:
            self._tween = None
        return params

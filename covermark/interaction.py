"""Pointer gestures on stickers: drag, scale and rotate.

One gesture is active at a time and belongs to the pointer session that
started it. Moves return the sticker fields to update; applying them is
left to the caller (usually CoverDocument.update_sticker).
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .composition import Sticker, clamp_sticker_scale
from .constants import CoverConstants

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class InteractionError(Exception):
    """Raised for gesture events that do not match the active gesture."""


class InteractionState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    SCALING = "scaling"
    ROTATING = "rotating"


@dataclass(frozen=True)
class _Gesture:
    session_id: str
    state: InteractionState
    sticker_id: int
    pointer: Point
    origin: Point
    size: float
    scale: float
    rotation: float
    center: Point

    @property
    def distance(self) -> float:
        return math.hypot(self.pointer[0] - self.center[0], self.pointer[1] - self.center[1])

    @property
    def angle(self) -> float:
        return math.atan2(self.pointer[1] - self.center[1], self.pointer[0] - self.center[0])


class StickerInteraction:
    """State machine for sticker gestures in preview coordinates."""

    def __init__(self, width: float = CoverConstants.PREVIEW_WIDTH,
                 height: float = CoverConstants.PREVIEW_HEIGHT):
        self.width = width
        self.height = height
        self._gesture: Optional[_Gesture] = None

    @property
    def state(self) -> InteractionState:
        return self._gesture.state if self._gesture else InteractionState.IDLE

    @property
    def active_sticker_id(self) -> Optional[int]:
        return self._gesture.sticker_id if self._gesture else None

    def _begin(self, state: InteractionState, session_id: str, sticker: Sticker,
               pointer: Point) -> None:
        if self._gesture is not None:
            raise InteractionError(
                f"Gesture {self._gesture.state.value} already active for session "
                f"{self._gesture.session_id}")
        size = sticker.preview_size()
        self._gesture = _Gesture(
            session_id=session_id,
            state=state,
            sticker_id=sticker.id,
            pointer=pointer,
            origin=(sticker.x, sticker.y),
            size=size,
            scale=sticker.scale,
            rotation=sticker.rotation,
            center=(sticker.x + size / 2, sticker.y + size / 2),
        )
        logger.debug(f"{state.value} sticker {sticker.id} in session {session_id}")

    def begin_drag(self, session_id: str, sticker: Sticker, pointer: Point) -> None:
        self._begin(InteractionState.DRAGGING, session_id, sticker, pointer)

    def begin_scale(self, session_id: str, sticker: Sticker, pointer: Point) -> None:
        self._begin(InteractionState.SCALING, session_id, sticker, pointer)

    def begin_rotate(self, session_id: str, sticker: Sticker, pointer: Point) -> None:
        self._begin(InteractionState.ROTATING, session_id, sticker, pointer)

    def _check(self, session_id: str) -> _Gesture:
        if self._gesture is None:
            raise InteractionError("No gesture in progress")
        if self._gesture.session_id != session_id:
            raise InteractionError(
                f"Session {session_id} does not own the active gesture")
        return self._gesture

    def move(self, session_id: str, pointer: Point) -> Dict[str, float]:
        """Sticker fields implied by the pointer's new position.

        Raises:
            InteractionError: If no gesture is active or another session owns it.
        """
        gesture = self._check(session_id)

        if gesture.state is InteractionState.DRAGGING:
            x = gesture.origin[0] + pointer[0] - gesture.pointer[0]
            y = gesture.origin[1] + pointer[1] - gesture.pointer[1]
            x = min(max(0.0, x), max(0.0, self.width - gesture.size))
            y = min(max(0.0, y), max(0.0, self.height - gesture.size))
            return {"x": x, "y": y}

        if gesture.state is InteractionState.SCALING:
            start = gesture.distance
            distance = math.hypot(pointer[0] - gesture.center[0], pointer[1] - gesture.center[1])
            ratio = distance / start if start else 1.0
            return {"scale": clamp_sticker_scale(gesture.scale * ratio)}

        angle = math.atan2(pointer[1] - gesture.center[1], pointer[0] - gesture.center[0])
        return {"rotation": gesture.rotation + math.degrees(angle - gesture.angle)}

    def end(self, session_id: str) -> None:
        self._check(session_id)
        self._gesture = None

    def cancel(self) -> None:
        """Drop any gesture regardless of session."""
        self._gesture = None

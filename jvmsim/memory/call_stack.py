"""
Call stack state for JVMSim.

An ordered sequence of active frames; the last element is the top frame.
"""

from typing import List, Optional
from dataclasses import dataclass


@dataclass(frozen=True)
class StackFrame:
    """A single method invocation on the VM stack"""
    id: int
    label: str


class CallStack:
    """Owns the frames of the simulated thread"""

    def __init__(self):
        self._frames: List[StackFrame] = []
        self._next_frame_id = 1

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def frames(self) -> List[StackFrame]:
        return list(self._frames)

    @property
    def is_empty(self) -> bool:
        return not self._frames

    @property
    def top(self) -> Optional[StackFrame]:
        return self._frames[-1] if self._frames else None

    def push(self, label: Optional[str] = None) -> StackFrame:
        """Push a new frame; the default label reflects the resulting depth."""
        if label is None:
            label = f"method_{len(self._frames) + 1}()"

        frame = StackFrame(id=self._next_frame_id, label=label)
        self._next_frame_id += 1
        self._frames.append(frame)
        return frame

    def pop(self) -> Optional[StackFrame]:
        """Remove and return the top frame, or None if the stack is empty"""
        if not self._frames:
            return None
        return self._frames.pop()

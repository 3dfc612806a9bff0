"""
Error handling for the JVMSim simulation.

Two kinds of problems exist. Simulation conditions (out of memory, empty
stack, promotion failure, ...) are part of what the simulator teaches;
they are reported to the event log and returned to the caller, never
raised. Programming and setup mistakes (bad configuration, a scheduler
that never drains) raise ``SimulationError`` subclasses.
"""

from typing import Optional, List
from enum import Enum
from dataclasses import dataclass


class SimulationCondition(Enum):
    """Non-fatal outcomes reported by a transition"""
    BUSY = "busy"                               # Lock held, request ignored
    OUT_OF_MEMORY = "out_of_memory"             # Single allocation at capacity
    CAPACITY_OVERFLOW = "capacity_overflow"     # Batch pushed heap past its limit
    EMPTY_STACK = "empty_stack"                 # Return with no frame to pop
    PROMOTION_FAILURE = "promotion_failure"     # Old generation refused survivors


@dataclass
class Diagnostic:
    """Details attached to a simulation error"""
    message: str
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        result = f"{self.severity.upper()}: {self.message}"
        if self.code:
            result += f" [{self.code}]"

        if self.help_text:
            result += f"\n  help: {self.help_text}"

        if self.suggestions:
            result += "\n  suggestions:"
            for suggestion in self.suggestions:
                result += f"\n    - {suggestion}"

        return result


class SimulationError(Exception):
    """Base class for errors raised by the simulator itself"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class ConfigurationError(SimulationError, ValueError):
    """Raised for configuration values the simulator cannot work with"""


class SchedulerError(SimulationError, RuntimeError):
    """Raised when scheduled phases never settle"""

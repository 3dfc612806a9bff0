"""
Configuration for the JVMSim simulator.

The two operator-facing knobs (heap size and batch size) are bounded
and quantized the same way the control panel sliders are. Everything
else controls pacing and the survival policy.
"""

import os
from typing import Optional, Mapping
from dataclasses import dataclass

from .errors import ConfigurationError


MIN_HEAP_SIZE = 60
MAX_HEAP_SIZE = 500
HEAP_SIZE_STEP = 10

MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 100


def quantize_heap_size(value: int) -> int:
    """Clamp a heap size to the slider range and snap it to the step"""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigurationError(f"Heap size must be an integer, got {value!r}",
                                 code="E_HEAP_SIZE")
    snapped = ((value + HEAP_SIZE_STEP // 2) // HEAP_SIZE_STEP) * HEAP_SIZE_STEP
    return max(MIN_HEAP_SIZE, min(MAX_HEAP_SIZE, snapped))


def clamp_batch_size(value: int) -> int:
    """Clamp a batch size to the accepted range"""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigurationError(f"Batch size must be an integer, got {value!r}",
                                 code="E_BATCH_SIZE")
    return max(MIN_BATCH_SIZE, min(MAX_BATCH_SIZE, value))


@dataclass
class SimulationConfig:
    """Configuration parameters for the simulator"""

    # Operator inputs
    max_heap_size: int = 60
    batch_size: int = 20

    # Phase pacing, in seconds
    class_loading_delay: float = 0.8
    method_area_delay: float = 0.8
    batch_delay: float = 0.6
    stack_delay: float = 0.6
    gc_mark_delay: float = 1.0
    gc_promote_delay: float = 0.8
    auto_gc_settle_delay: float = 1.5
    flash_duration: float = 0.5

    # Survival policy
    young_survival_probability: float = 0.5
    old_survival_probability: float = 0.7
    seed: Optional[int] = None

    # Event log
    log_capacity: int = 50

    def __post_init__(self):
        self.max_heap_size = quantize_heap_size(self.max_heap_size)
        self.batch_size = clamp_batch_size(self.batch_size)

        for name in ('young_survival_probability', 'old_survival_probability'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}",
                                         code="E_PROBABILITY")

        for name in ('class_loading_delay', 'method_area_delay', 'batch_delay',
                     'stack_delay', 'gc_mark_delay', 'gc_promote_delay',
                     'auto_gc_settle_delay', 'flash_duration'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} cannot be negative", code="E_DELAY")

        if self.log_capacity < 1:
            raise ConfigurationError("log_capacity must be at least 1", code="E_LOG")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'SimulationConfig':
        """
        Build a configuration from JVMSIM_* environment variables.

        Recognised: JVMSIM_HEAP_SIZE, JVMSIM_BATCH_SIZE, JVMSIM_SEED.
        Explicit keyword overrides win over the environment.
        """
        environ = os.environ if environ is None else environ
        values = {}

        for key, field_name in (('JVMSIM_HEAP_SIZE', 'max_heap_size'),
                                ('JVMSIM_BATCH_SIZE', 'batch_size'),
                                ('JVMSIM_SEED', 'seed')):
            raw = environ.get(key)
            if raw is None or raw == '':
                continue
            try:
                values[field_name] = int(raw)
            except ValueError:
                raise ConfigurationError(f"{key} must be an integer, got {raw!r}",
                                         code="E_ENV") from None

        values.update(overrides)
        return cls(**values)

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class DiscreteWeights:
    values: Tuple[float, ...]
    probabilities: Tuple[float, ...]


@dataclass(frozen=True)
class NormalWeights:
    mean: float
    stddev: float


WeightModel = Union[DiscreteWeights, NormalWeights]


@dataclass(frozen=True)
class InstrumentConfig:
    scale_resolution: float
    measurement_noise_std: float = 0.0


@dataclass(frozen=True)
class SimulationConfig:
    total_parts: int
    calibration_sample_size: int
    weight_model: WeightModel
    instrument: InstrumentConfig


@dataclass(frozen=True)
class Finite:
    value: int


@dataclass(frozen=True)
class Unmeasurable:
    """Calibration average quantized to zero while weight is on the pan."""


DisplayedCount = Union[Finite, Unmeasurable]


@dataclass(frozen=True)
class CheckpointResult:
    actual_count: int
    displayed_count: DisplayedCount
    deviation: Optional[int]

    @property
    def measurable(self) -> bool:
        return isinstance(self.displayed_count, Finite)


@dataclass(frozen=True)
class SimulationReport:
    checkpoints: Tuple[CheckpointResult, ...]
    max_abs_deviation: int
    max_abs_deviation_percent: float
    final_deviation: Optional[int]
    final_deviation_percent: Optional[float]

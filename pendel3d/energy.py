"""Energy samples and the running energy history shown in the chart."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class EnergySample:
    kinetic_energy: float = 0.0
    potential_energy: float = 0.0
    mechanical_energy: float = 0.0
    time: int = 0


ZERO_SAMPLE = EnergySample()


class EnergyHistory:
    """Append-only sequence of energy samples with a logical tick clock.

    ``time`` counts samples, not wall-clock time. With ``max_samples`` set the
    oldest samples are dropped, but the tick counter keeps running.
    """

    def __init__(self, max_samples: Optional[int] = None) -> None:
        self.max_samples = max_samples
        self._samples: Deque[EnergySample] = deque(maxlen=max_samples)

    def append_sample(self, kinetic: float, potential: float, mechanical: float) -> EnergySample:
        time = self._samples[-1].time + 1 if self._samples else 0
        sample = EnergySample(
            kinetic_energy=float(kinetic),
            potential_energy=float(potential),
            mechanical_energy=float(mechanical),
            time=time,
        )
        self._samples.append(sample)
        return sample

    def latest(self) -> EnergySample:
        return self._samples[-1] if self._samples else ZERO_SAMPLE

    @property
    def samples(self) -> List[EnergySample]:
        return list(self._samples)

    def as_series(self) -> Dict[str, List[float]]:
        """Parallel columns for plotting the energy over time."""
        return {
            "mechanicalEnergy": [s.mechanical_energy for s in self._samples],
            "potentialEnergy": [s.potential_energy for s in self._samples],
            "kineticEnergy": [s.kinetic_energy for s in self._samples],
            "time": [s.time for s in self._samples],
        }

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[EnergySample]:
        return iter(self._samples)

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .individual import Individual
from .sources import INFINITE_UNITS, Source


@dataclass(slots=True)
class CycleMetrics:
    tick: int
    population: int
    births: int
    deaths: int
    average_energy: float
    units_consumed: int
    units_available: int


def create_metrics(
    tick: int,
    births: int,
    deaths: int,
    units_consumed: int,
    individuals: Iterable[Individual],
    sources: Iterable[Source],
) -> CycleMetrics:
    energies = [individual.energy for individual in individuals]
    # Unlimited sources are excluded from the total.
    available = sum(source.current_unit_count for source in sources if source.current_unit_count < INFINITE_UNITS)
    return CycleMetrics(
        tick=tick,
        population=len(energies),
        births=births,
        deaths=deaths,
        average_energy=sum(energies) / len(energies) if energies else 0.0,
        units_consumed=units_consumed,
        units_available=available,
    )

"""
Run configuration for the selection search and reports.

Defaults live in ``configs/defaults.json``; the command line overrides them.
"""

from dataclasses import dataclass, field

from .common import load_defaults
from .constraints import Constraints
from .models import Term

_DEFAULTS = load_defaults()


@dataclass(frozen=True)
class CompensatrConfig:
    money: float
    min_continents: int = _DEFAULTS['min_continents']
    min_short_term_percent: float = _DEFAULTS['min_short_term_percent']
    min_medium_term_percent: float = _DEFAULTS['min_medium_term_percent']
    min_long_term_percent: float = _DEFAULTS['min_long_term_percent']
    target_years: int = _DEFAULTS['target_years']
    iterations: int = _DEFAULTS['iterations']
    seed: int | None = None
    timeout: float | None = None  # seconds
    workers: int = _DEFAULTS['workers']
    verbose: bool = field(default=False, compare=False)

    def __post_init__(self):
        if self.money is None or self.money <= 0:
            raise ValueError(f'money must be positive, got {self.money}')
        if self.min_continents < 0:
            raise ValueError(f'min_continents must not be negative, got {self.min_continents}')
        for term, percent in self.min_percents.items():
            if not 0 <= percent <= 100:
                raise ValueError(f'minimum percent for {term.value} must be within 0..100, got {percent}')
        if self.iterations < 1:
            raise ValueError(f'iterations must be at least 1, got {self.iterations}')
        if self.workers < 1:
            raise ValueError(f'workers must be at least 1, got {self.workers}')
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f'timeout must be positive, got {self.timeout}')

    @property
    def constraints(self) -> Constraints:
        return Constraints(min_continents=self.min_continents, min_percents=self.min_percents)

    @property
    def min_percents(self) -> dict[Term, float]:
        """Minimum share of spend required per term, in percent."""
        return {
            Term.SHORT: self.min_short_term_percent,
            Term.MEDIUM: self.min_medium_term_percent,
            Term.LONG: self.min_long_term_percent,
        }

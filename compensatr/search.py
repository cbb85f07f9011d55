"""
Monte Carlo search for the selection of projects capturing the most CO2 per year.

Each trial fills a basket by drawing projects uniformly at random, with
replacement, until the next draw no longer fits in the remaining budget.
Trials breaking a constraint are discarded and the valid trial with the
highest yearly CO2 volume wins. There is no optimality guarantee: different
seeds can give different selections.
"""

import time
import typing
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from .config import CompensatrConfig
from .constraints import Constraints, count_continents, is_valid
from .models import Project
from .report import new_best_summary


@dataclass(frozen=True)
class Candidate:
    """A selection together with its yearly CO2 volume and the money it costs."""

    selection: tuple[Project, ...] = ()
    value: float = 0.0
    spent: float = 0.0


def run_trial(pool: typing.Sequence[Project], money: float, rng: np.random.Generator) -> Candidate:
    """
    Fill one basket of projects drawn at random until the budget runs out.

    Parameters
    ----------
    pool : Sequence[Project]
        Projects to draw from, with replacement.
    money : float
        Budget of the trial.
    rng : np.random.Generator
        Random source.

    Returns
    -------
    Candidate
        The drawn selection, its yearly CO2 volume and the money spent.
    """
    remaining = money
    selection = []
    value = 0.0
    size = len(pool)
    while size:
        project = pool[rng.integers(size)]
        if project.price > remaining:
            break
        selection.append(project)
        remaining -= project.price
        value += project.yearly_co2_vol
    return Candidate(selection=tuple(selection), value=value, spent=money - remaining)


def _search_shard(
    pool: typing.Sequence[Project],
    money: float,
    constraints: Constraints,
    iterations: int,
    rng: np.random.Generator,
    deadline: float | None = None,
    verbose: bool = False,
) -> Candidate | None:
    best = None
    for trial in range(iterations):
        if deadline is not None and time.monotonic() >= deadline:
            print(f'  ⚠ Warning: search timed out after {trial:,} trials, keeping best so far')
            break
        candidate = run_trial(pool, money, rng)
        if not is_valid(candidate.selection, constraints):
            continue
        if best is None or candidate.value > best.value:
            best = candidate
            if verbose:
                print(new_best_summary(best.value, best.spent, count_continents(best.selection)))
    return best


def _split_iterations(iterations: int, workers: int) -> list[int]:
    shards = min(workers, iterations)
    return [iterations // shards + (1 if i < iterations % shards else 0) for i in range(shards)]


def _reduce(candidates: typing.Iterable[Candidate | None], constraints: Constraints) -> Candidate | None:
    best = None
    for candidate in candidates:
        if candidate is not None and (best is None or candidate.value > best.value):
            best = candidate
    if best is not None and not is_valid(best.selection, constraints):
        raise RuntimeError('Best selection across search shards failed validation')
    return best


def search(
    pool: typing.Sequence[Project],
    config: CompensatrConfig,
    rng: np.random.Generator | None = None,
) -> Candidate:
    """
    Search for the valid selection of projects with the highest yearly CO2 volume.

    Parameters
    ----------
    pool : Sequence[Project]
        Enriched projects available for purchase.
    config : CompensatrConfig
        Budget, constraints, iteration cap, timeout, worker count and seed.
    rng : np.random.Generator, optional
        Random source. If None, one is created from ``config.seed``.

    Returns
    -------
    Candidate
        Best selection found, or an empty candidate if no trial satisfied
        every constraint.
    """
    if rng is None:
        rng = np.random.default_rng(config.seed)
    pool = list(pool)
    if not pool:
        print('⚠ Warning: no projects available to select from')
        return Candidate()

    constraints = config.constraints
    deadline = None if config.timeout is None else time.monotonic() + config.timeout
    print(f'Searching {config.iterations:,} combinations of {len(pool):,} projects...')

    if config.workers == 1:
        best = _search_shard(
            pool, config.money, constraints, config.iterations, rng, deadline, config.verbose
        )
    else:
        shards = _split_iterations(config.iterations, config.workers)
        print(f'  Running {len(shards)} search shards in parallel')
        with ThreadPoolExecutor(max_workers=len(shards)) as executor:
            futures = [
                executor.submit(
                    _search_shard,
                    pool,
                    config.money,
                    constraints,
                    iterations,
                    shard_rng,
                    deadline,
                    config.verbose,
                )
                for iterations, shard_rng in zip(shards, rng.spawn(len(shards)))
            ]
            best = _reduce((future.result() for future in futures), constraints)

    if best is None:
        print('  No selection satisfied every constraint')
        return Candidate()
    return best

"""Generation tracking and cycle detection around a Universe."""

from typing import Deque, Dict, Tuple
from collections import deque
import logging
import numpy as np

from .universe import Universe

logger = logging.getLogger(__name__)


class Simulation:
    """Drives a :class:`Universe` one generation at a time.

    Tracks the generation number and population history, and detects when
    the universe revisits an earlier state by hashing its packed cell bytes.
    """

    def __init__(self, universe: Universe, history_size: int = 100, state_history_size: int = 1000) -> None:
        """Initialize the simulation.

        Args:
            universe: The universe to advance
            history_size: Number of population samples to keep
            state_history_size: Number of recent states remembered for cycle
                detection; cycles longer than this go unnoticed
        """
        if state_history_size < 1:
            raise ValueError(f"state_history_size must be positive, got {state_history_size}")

        self.universe = universe
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=history_size)
        self._seen_states: Dict[bytes, int] = {}
        self._state_history: Deque[bytes] = deque()
        self._state_history_size = state_history_size
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.universe.population

    @property
    def population_history(self) -> list:
        """Recent population counts, oldest first."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        """Whether a cycle has been detected."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of the detected cycle (0 if none)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where the cycle started (0 if none)."""
        return self._cycle_start_generation

    def step(self) -> None:
        """Advance the universe by one generation."""
        self._check_for_cycles()
        self.universe.tick()
        self._generation += 1
        self._update_population_history()

    def _update_population_history(self) -> None:
        self._population_history.append(self.population)

    def _state_key(self) -> bytes:
        # Padding bits are not state, so hash the unpacked live region only
        return np.packbits(self.universe.cells_array().ravel(), bitorder="little").tobytes()

    def _check_for_cycles(self) -> None:
        """Record the current state, or flag a cycle if it was seen before."""
        if self._cycle_detected:
            return

        current_state = self._state_key()
        if current_state in self._seen_states:
            first_occurrence = self._seen_states[current_state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            logger.debug(
                "Cycle of length %d detected at generation %d", self._cycle_length, self._generation
            )
            return

        # Recorded states are all distinct, so the oldest one owns its map entry
        if len(self._state_history) >= self._state_history_size:
            del self._seen_states[self._state_history.popleft()]

        self._seen_states[current_state] = self._generation
        self._state_history.append(current_state)

    def reset(self, clear_universe: bool = True) -> None:
        """Reset counters and history.

        Args:
            clear_universe: Whether to kill every cell of the universe in place
        """
        if clear_universe:
            self.universe.clear()

        self._generation = 0
        self._population_history.clear()
        self.clear_cycle_detection()
        self._update_population_history()

    def clear_cycle_detection(self) -> None:
        """Forget seen states, e.g. after the universe was edited by hand."""
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._seen_states.clear()
        self._state_history.clear()

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Run until the universe cycles, dies out, or hits the limit.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self._cycle_detected:
                return self._generation, "cycle"

            if self.population == 0:
                return self._generation, "extinction"

        return self._generation, "max_generations"

    def get_statistics(self) -> Dict:
        """Summarize the run so far."""
        width, height = self.universe.shape
        return {
            "generation": self._generation,
            "population": self.population,
            "population_history": list(self._population_history),
            "population_density": self.population / (width * height),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": (width, height),
            "buffer_bytes": self.universe.cell_buffer_length(),
        }

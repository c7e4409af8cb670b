"""Abstract base class for simulation output adapters."""
from abc import ABC, abstractmethod
from typing import Optional

from ..particle import Action, ParticleSource


class OutputInterface(ABC):
    """Callback interface driven by the simulation once per lifecycle event.

    The driver calls on_event_start() and on_event_end() around each event,
    on_intermediate_time() at every output time step and on_interaction()
    for every performed action. Adapters own their output resources and
    release them in close(); using an adapter as a context manager
    guarantees that close() runs.
    """

    @abstractmethod
    def on_event_start(self, particles: ParticleSource, event_number: int) -> None:
        """Called once the initial state of an event has been set up."""
        pass

    @abstractmethod
    def on_event_end(
        self,
        particles: ParticleSource,
        event_number: int,
        impact_parameter: float,
        empty_event: bool,
    ) -> None:
        """Called after the last time step of an event.

        Args:
            particles: final particle state
            event_number: number of the finished event
            impact_parameter: impact parameter of the event [fm]
            empty_event: True if projectile and target did not interact
        """
        pass

    @abstractmethod
    def on_intermediate_time(
        self,
        particles: ParticleSource,
        clock: Optional[object] = None,
        dens_param: Optional[object] = None,
    ) -> None:
        """Called at every intermediate output time."""
        pass

    @abstractmethod
    def on_interaction(self, action: Action, density: float = 0.0) -> None:
        """Called for every performed interaction."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Flush and release all output resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

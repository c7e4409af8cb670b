"""
Output options shared by the output adapters.

Options mirror the configuration keys of the transport code, e.g.

    OutputParameters.from_dict({
        "write_collisions": True,
        "particles_only_final": "if_not_empty",
        "autosave_frequency": 100,
    })
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import Any, Mapping, Union

from ..constants import DEFAULT_AUTOSAVE_FREQUENCY, MAX_BUFFER_SIZE
from ..errors import ConfigurationError


class OnlyFinal(enum.Enum):
    """Which particle blocks an event produces."""
    NO = "no"                       # initial, intermediate and final blocks
    YES = "yes"                     # final block only
    IF_NOT_EMPTY = "if_not_empty"   # final block only, skipped for empty events

    @classmethod
    def coerce(cls, value: Union["OnlyFinal", bool, str]) -> "OnlyFinal":
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.YES if value else cls.NO
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigurationError(
            f"particles_only_final must be one of 'no', 'yes', 'if_not_empty' "
            f"or a bool, got {value!r}"
        )


@dataclass
class OutputParameters:
    """Recognised output options."""
    write_particles: bool = True
    write_collisions: bool = False
    write_initial_conditions: bool = False
    particles_only_final: OnlyFinal = OnlyFinal.NO
    extended_particle_output: bool = False
    extended_collision_output: bool = False
    extended_ic_output: bool = False
    autosave_frequency: int = DEFAULT_AUTOSAVE_FREQUENCY
    max_buffer_size: int = MAX_BUFFER_SIZE

    def __post_init__(self):
        self.particles_only_final = OnlyFinal.coerce(self.particles_only_final)
        for name in ("autosave_frequency", "max_buffer_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

    @property
    def particles_extended(self) -> bool:
        """Whether the particles table carries the extended columns."""
        return bool(
            (self.write_particles and self.extended_particle_output)
            or (self.write_initial_conditions and self.extended_ic_output)
        )

    @property
    def collisions_extended(self) -> bool:
        return bool(self.write_collisions and self.extended_collision_output)

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "OutputParameters":
        """Build parameters from a plain mapping of option names."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown output option(s): {', '.join(unknown)}")
        return cls(**dict(options))

    def to_dict(self) -> dict:
        """Plain mapping of the options (enum values as strings)."""
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        out["particles_only_final"] = self.particles_only_final.value
        return out

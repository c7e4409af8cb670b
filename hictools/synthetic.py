"""
Synthetic event stream for exercising output adapters without a transport code.

Each event:
1. on_event_start with N particles (pions and protons, isotropic momenta)
2. n_steps intermediate times, particles drift on straight lines
3. optional two-body elastic interactions between random particle pairs
4. on_event_end with a sampled impact parameter
"""
import numpy as np
from dataclasses import dataclass

from .particle import Action, ParticleBank, ProcessType
from .output.base import OutputInterface

# (pdg code, charge, mass [GeV])
SPECIES = np.array([
    (211, 1, 0.13957),
    (-211, -1, 0.13957),
    (111, 0, 0.13498),
    (2212, 1, 0.93827),
])


@dataclass
class SyntheticRun:
    """Counts of what a synthetic run handed to the output."""
    n_events: int
    n_blocks: int
    n_interactions: int


def sample_isotropic(rng, n):
    """Sample n isotropic unit direction vectors."""
    cos_theta = 2.0 * rng.random(n) - 1.0
    sin_theta = np.sqrt(1.0 - cos_theta**2)
    phi = 2.0 * np.pi * rng.random(n)
    return sin_theta * np.cos(phi), sin_theta * np.sin(phi), cos_theta


def random_bank(rng, n, t=0.0, radius=5.0):
    """n particles uniformly in a sphere of given radius [fm] at time t."""
    bank = ParticleBank.create_empty(n)
    species = SPECIES[rng.integers(0, len(SPECIES), size=n)]
    bank.pdgcode[:] = species[:, 0].astype(np.int32)
    bank.charge[:] = species[:, 1].astype(np.int32)
    mass = species[:, 2]

    ux, uy, uz = sample_isotropic(rng, n)
    r = radius * np.cbrt(rng.random(n))
    bank.x[:], bank.y[:], bank.z[:] = r * ux, r * uy, r * uz
    bank.t[:] = t

    p = rng.exponential(0.4, size=n)
    vx, vy, vz = sample_isotropic(rng, n)
    bank.px[:], bank.py[:], bank.pz[:] = p * vx, p * vy, p * vz
    bank.p0[:] = np.sqrt(mass**2 + p**2)
    bank.formation_time[:] = t
    return bank


def propagate(bank, dt):
    """Move every particle on a straight line for a time dt [fm]."""
    for pos, mom in (("x", "px"), ("y", "py"), ("z", "pz")):
        getattr(bank, pos)[:] += getattr(bank, mom) / bank.p0 * dt
    bank.t[:] += dt


def elastic_action(rng, bank):
    """Elastic scattering of a random pair; the pair's momenta are rotated."""
    i, j = rng.choice(bank.n_particles, size=2, replace=False)
    incoming = [bank[i], bank[j]]
    outgoing = [bank[i], bank[j]]
    p = np.sqrt(bank.px[i]**2 + bank.py[i]**2 + bank.pz[i]**2)
    ux, uy, uz = sample_isotropic(rng, 1)
    for k, sign in ((0, 1.0), (1, -1.0)):
        outgoing[k].px = float(sign * p * ux[0])
        outgoing[k].py = float(sign * p * uy[0])
        outgoing[k].pz = float(sign * p * uz[0])
        outgoing[k].ncoll += 1
        outgoing[k].time_last_collision = outgoing[k].t
        outgoing[k].proc_type_origin = int(ProcessType.ELASTIC)
    weight = float(rng.uniform(1.0, 40.0))   # mb
    return Action(incoming, outgoing, weight=weight, partial_weight=weight,
                  process_type=ProcessType.ELASTIC)


def run_synthetic_events(output: OutputInterface, n_events=2, n_particles=100,
                         n_steps=3, dt=1.0, n_interactions=0, seed=42) -> SyntheticRun:
    """Drive an output adapter through n_events synthetic events."""
    rng = np.random.default_rng(seed)
    n_blocks = 0
    n_actions = 0
    for event in range(n_events):
        bank = random_bank(rng, n_particles)
        output.on_event_start(bank, event)
        n_blocks += 1
        for _ in range(n_steps):
            propagate(bank, dt)
            for _ in range(n_interactions):
                output.on_interaction(elastic_action(rng, bank))
                n_actions += 1
            output.on_intermediate_time(bank)
            n_blocks += 1
        b = float(np.sqrt(rng.random()) * 10.0)
        output.on_event_end(bank, event, b, empty_event=False)
        n_blocks += 1
    return SyntheticRun(n_events=n_events, n_blocks=n_blocks, n_interactions=n_actions)

"""Profile tick_simulation() to identify performance bottlenecks."""

import cProfile
import gc
import pstats
import time
from io import StringIO

from linkfield.clock import ManualClock
from linkfield.config import SimulationConfig
from linkfield.engine.simulation import Simulation, create_simulation, tick_simulation

DT = 1.0 / 60.0


def create_test_simulation(particle_count: int = 150) -> tuple[Simulation, ManualClock]:
    """Create a seeded simulation on a manual clock."""
    clock = ManualClock()
    config = SimulationConfig(particle_count=particle_count, seed=1)
    return create_simulation(config, clock=clock), clock


def run_ticks(sim: Simulation, clock: ManualClock, num_ticks: int) -> None:
    for _ in range(num_ticks):
        clock.advance(DT)
        tick_simulation(sim)


def measure_tick_rate(particle_count: int, num_ticks: int) -> tuple[float, int]:
    """Measure ticks per second and the final link count."""
    sim, clock = create_test_simulation(particle_count)

    start_time = time.perf_counter()
    run_ticks(sim, clock, num_ticks)
    elapsed = time.perf_counter() - start_time

    ticks_per_sec = num_ticks / elapsed if elapsed > 0 else 0
    return ticks_per_sec, len(sim.registry)


def profile_tick_simulation(num_ticks: int) -> str:
    """Profile tick_simulation and return profiling results."""
    sim, clock = create_test_simulation()
    profiler = cProfile.Profile()

    profiler.enable()
    run_ticks(sim, clock, num_ticks)
    profiler.disable()

    stats_stream = StringIO()
    stats = pstats.Stats(profiler, stream=stats_stream)
    stats.sort_stats("cumulative")
    stats.print_stats(30)

    return stats_stream.getvalue()


def test_link_stability(num_ticks: int = 3000) -> tuple[int, float]:
    """Run long enough for links to settle; report links and the oldest age."""
    gc.collect()
    sim, clock = create_test_simulation()
    run_ticks(sim, clock, num_ticks)

    now = clock.now()
    oldest = max((link.age(now) for link in sim.registry), default=0.0)
    return len(sim.registry), oldest


def main():
    print("=" * 60)
    print("Performance Profiling: tick_simulation()")
    print("=" * 60)

    print("\nWarm-up run (100 ticks)...")
    measure_tick_rate(150, 100)

    print("\n--- Tick Rate by Particle Count (600 ticks) ---")
    results = {}
    for count in (50, 150, 500, 2000):
        ticks_per_sec, links = measure_tick_rate(count, 600)
        results[count] = ticks_per_sec
        print(f"{count:5d} particles: {ticks_per_sec:8.1f} ticks/sec, {links} links")

    print("\n--- Link Stability (3000 ticks) ---")
    link_count, oldest = test_link_stability()
    print(f"Links at end: {link_count}")
    print(f"Oldest link: {oldest:.1f}s")

    print("\n--- Profiling Breakdown (1000 ticks) ---")
    print(profile_tick_simulation(1000))

    print("=" * 60)
    print("Performance Assessment")
    print("=" * 60)

    target_ticks = 60
    if results[150] >= target_ticks:
        print(f"✓ PASS: {results[150]:.0f} ticks/sec with 150 particles (target: {target_ticks})")
    else:
        print(f"✗ FAIL: {results[150]:.0f} ticks/sec (target: {target_ticks})")


if __name__ == "__main__":
    main()

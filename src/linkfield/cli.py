"""Command-line interface for linkfield."""

import argparse
import json
import sys

from pydantic import ValidationError

from linkfield import __version__
from linkfield.clock import ManualClock
from linkfield.config import SimulationConfig
from linkfield.errors import ConfigurationError
from linkfield.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def _serve(parsed: argparse.Namespace) -> int:
    import uvicorn

    print(f"Starting linkfield server at http://{parsed.host}:{parsed.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "linkfield.server.app:app",
        host=parsed.host,
        port=parsed.port,
        reload=parsed.reload,
    )
    return 0


def _run(parsed: argparse.Namespace) -> int:
    from linkfield.engine.simulation import create_simulation, tick_simulation
    from linkfield.projection.projector import frame_to_dict, project

    overrides = {}
    if parsed.seed is not None:
        overrides["seed"] = parsed.seed
    if parsed.particles is not None:
        overrides["particle_count"] = parsed.particles

    clock = ManualClock()
    try:
        config = SimulationConfig(**overrides)
        sim = create_simulation(config, clock=clock)
    except (ValidationError, ConfigurationError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    result = sim.current_result()
    for _ in range(parsed.ticks):
        clock.advance(parsed.dt)
        result = tick_simulation(sim)

    oldest = max((link.age(result.now) for link in result.links), default=0.0)
    logger.info(
        "Ran %d ticks (%.1fs simulated), oldest link %.2fs",
        sim.tick,
        result.now,
        oldest,
        extra={
            "tick": sim.tick,
            "particles": len(result.positions),
            "links": len(result.links),
            "new_links": result.stats.created,
            "kept_links": result.stats.retained,
            "dropped_links": result.stats.dropped,
        },
    )

    if parsed.json:
        json.dump(frame_to_dict(project(sim, result)), sys.stdout)
        sys.stdout.write("\n")
    return 0


def main(args: list[str] | None = None) -> int:
    """Run the linkfield server or a headless simulation.

    Args:
        args: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        prog="linkfield",
        description="Wandering particles joined by a proximity graph with stable link ages",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP/WebSocket server")
    serve.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    serve.set_defaults(handler=_serve)

    run = subparsers.add_parser("run", help="Run a headless simulation on a manual clock")
    run.add_argument(
        "--ticks",
        type=int,
        default=600,
        help="Number of ticks to run (default: 600)",
    )
    run.add_argument(
        "--dt",
        type=float,
        default=1.0 / 60.0,
        help="Simulated seconds per tick (default: 1/60)",
    )
    run.add_argument("--seed", type=int, default=None, help="RNG seed")
    run.add_argument("--particles", type=int, default=None, help="Particle count")
    run.add_argument(
        "--json",
        action="store_true",
        help="Print the final frame as JSON on stdout",
    )
    run.set_defaults(handler=_run)

    parsed = parser.parse_args(args)
    configure_logging()
    return parsed.handler(parsed)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Example script demonstrating the usage of dataclass_cmdline.

This script shows how to define option dataclasses with different field
types, register commands for them and dispatch a command line.

Try:
    python basic_example.py help
    python basic_example.py simulate -name run1 -t 30.5 -mode fast
    python basic_example.py simulate run2 -process {-max_workers 8}
    python basic_example.py clean /tmp/a /tmp/b
"""

import enum
import logging
import sys
from dataclasses import dataclass, field
from typing import Optional

from dataclass_cmdline import CommandDescriptor, parse_and_run


class Mode(enum.Enum):
    FAST = "fast"
    ACCURATE = "accurate"


@dataclass
class ProcessConfig:
    """Configuration for process parameters."""

    max_workers: int = field(
        default=4, metadata={"help": "Maximum number of worker processes"}
    )
    timeout: float = field(default=300.0, metadata={"help": "Timeout in seconds"})


@dataclass
class SimulationConfig:
    """Configuration for simulation parameters."""

    name: str = field(
        default="", metadata={"required": True, "help": "Name of the simulation"}
    )
    temperature: float = field(
        default=27.0, metadata={"short": "t", "help": "Temperature in Celsius"}
    )
    mode: Mode = field(default=Mode.ACCURATE, metadata={"help": "Simulation mode"})
    output_dir: str = field(
        default="/tmp/output",
        metadata={"env": True, "help": "Output directory path"},
    )
    verbose: bool = field(default=False, metadata={"help": "Enable verbose output"})
    process: Optional[ProcessConfig] = field(
        default=None, metadata={"help": "Process settings"}
    )


def simulate(config: SimulationConfig, args: list[str]) -> None:
    print("Parsed Configuration:")
    print("-" * 30)
    print(f"Simulation Name: {config.name}")
    print(f"Temperature: {config.temperature}°C")
    print(f"Mode: {config.mode.name}")
    print(f"Output Directory: {config.output_dir}")
    print(f"Verbose: {config.verbose}")
    print(f"Max Workers: {config.process.max_workers}")
    print(f"Timeout: {config.process.timeout}s")
    if args:
        print(f"Extra arguments: {args}")


def clean(args: list[str]) -> None:
    for path in args:
        print(f"Would remove {path}")


def main() -> None:
    """Main function demonstrating the dispatcher."""
    logging.basicConfig(level=logging.WARNING)
    commands = [
        CommandDescriptor(
            "simulate",
            simulate,
            option_type=SimulationConfig,
            alias="sim",
            description="Run a simulation",
        ),
        CommandDescriptor("clean", clean, description="Remove output directories"),
    ]
    parse_and_run(commands, sys.argv[1:], version="1.0.0")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Example script demonstrating nested command groups and async handlers.

Try:
    python command_group_example.py remote add -name origin -url https://example.com
    python command_group_example.py remote
    python command_group_example.py remote help
    python command_group_example.py fetch -remote origin
    python command_group_example.py batch steps.txt

where steps.txt holds option groups separated by '|', e.g. "-n 1 | -n 2 | -n 3".
"""

import asyncio
import sys
from dataclasses import dataclass, field

from dataclass_cmdline import (
    STRICT_COMMAND_NAME,
    CommandDescriptor,
    CommandGroup,
    parse_and_run,
    parse_options,
    split_batches,
)

REMOTES: dict[str, str] = {}


@dataclass
class AddRemoteOptions:
    name: str = field(default="", metadata={"required": True, "help": "Remote name"})
    url: str = field(default="", metadata={"required": True, "help": "Remote URL"})


@dataclass
class FetchOptions:
    remote: str = field(
        default="origin", metadata={"short": "r", "help": "Remote to fetch from"}
    )
    depth: int = field(default=0, metadata={"default_text": "full history"})


@dataclass
class StepOptions:
    n: int = field(default=0, metadata={"help": "Step number"})


def add_remote(options: AddRemoteOptions, args: list[str]) -> None:
    REMOTES[options.name] = options.url
    print(f"Added {options.name} -> {options.url}")


def list_remotes(args: list[str]) -> None:
    for name, url in sorted(REMOTES.items()):
        print(f"{name}\t{url}")
    if not REMOTES:
        print("(no remotes)")


async def fetch(options: FetchOptions, args: list[str]) -> None:
    print(f"Fetching from {options.remote}...")
    await asyncio.sleep(0.1)
    print("Done")


class Batch:
    def run(self, args: list[str]) -> None:
        for path in args:
            with open(path, "r") as f:
                self.run_steps(f.read())

    def run_steps(self, raw: str) -> None:
        for group in split_batches(raw):
            result = parse_options(group, StepOptions)
            if result.is_ok():
                print(f"step {result.unwrap().n}")
            else:
                print(f"skipped '{group}': {result.unwrap_err()}")


def main() -> None:
    remote = CommandGroup(
        [
            CommandDescriptor("add", add_remote, option_type=AddRemoteOptions),
            CommandDescriptor("list", list_remotes),
        ],
        default_argument="list",
    )
    commands = [
        CommandDescriptor(
            "remote", remote, is_subcommand=True, description="Manage remotes"
        ),
        CommandDescriptor("fetch", fetch, option_type=FetchOptions),
        CommandDescriptor("batch", Batch),
    ]
    parse_and_run(commands, sys.argv[1:], STRICT_COMMAND_NAME)


if __name__ == "__main__":
    main()

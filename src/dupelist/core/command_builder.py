"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/command_builder.py
Renders a SearchState into the shell command line that runs the duplicate finder
and pipes its output through the listing formatter.
"""

import re
import shlex
import shutil
import logging
from typing import Optional

from dupelist.core.models import SearchState, ListingOption

logger = logging.getLogger(__name__)

# "<prefix> {} \;" or "<prefix> {} +"
EXEC_CLAUSE_PATTERN = re.compile(r"^(.*) \{\} (\\;|\+)$")


def output_pipe_clause(listing_option: ListingOption) -> str:
    """
    Returns the clause appended after the directories.
    Exec-style clauses get a quoted placeholder. The terminator is kept as
    written: `\\;` becomes a quoted `;`, `+` stays `+` (batched exec), it is
    never swapped for a fixed platform terminator.
    """
    clause = listing_option.pipe_clause
    match = EXEC_CLAUSE_PATTERN.match(clause)
    if not match:
        return clause

    prefix, terminator = match.group(1), match.group(2)
    end = shlex.quote(";") if terminator == "\\;" else "+"
    return f"{prefix} {shlex.quote('{}')} {end}"


def full_command(program_path: str, state: SearchState, listing_option: ListingOption) -> str:
    """
    <program> <extra args> [<toggle flags>] [--size <value>] <dirs...> <pipe clause>

    Empty segments are skipped so the command never has doubled spaces.
    """
    segments = [
        shlex.quote(program_path),
        state.extra_args.strip(),
        state.build(),
        " ".join(shlex.quote(d) for d in state.directories),
        output_pipe_clause(listing_option),
    ]
    command = " ".join(s for s in segments if s)
    logger.debug(f"Built command: {command}")
    return command


def resolve_program(program: str, path: Optional[str] = None) -> str:
    """
    Finds the external program on the execution path.

    Raises:
        FileNotFoundError: if the program cannot be found
    """
    resolved = shutil.which(program, path=path)
    if resolved is None:
        raise FileNotFoundError(f"Program not found on PATH: {program}")
    return resolved

"""
calltrace CLI - run a Python program with named callables traced.

Usage:
    calltrace -t json.loads -t json.dumps script.py arg1 arg2
    calltrace -t os.path.join --serializer repr -m mypkg.tool input.txt
    python -m calltrace -c trace.yaml -t mymod.func script.py

Names are resolved against the module table before the program starts
(modules are imported as needed), so functions defined in the script itself
cannot be named.
"""

import argparse
import os
import runpy
import sys
from collections.abc import Sequence
from typing import Any

from . import __version__
from .config import TraceSettings, load_settings
from .exceptions import TraceError
from .tracer import Tracer

EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="calltrace",
        description="Run a Python script or module with named callables traced",
    )
    p.add_argument(
        "-t",
        "--trace",
        action="append",
        default=[],
        metavar="NAME",
        help="Dotted name of a callable to trace (repeatable)",
    )
    p.add_argument("-c", "--config", default=None, help="YAML settings file")
    p.add_argument("--serializer", choices=["json", "repr"], default=None)
    p.add_argument("--indent", type=int, default=None, help="Spaces per depth level")
    p.add_argument(
        "--max-length",
        type=int,
        default=None,
        help="Max characters per rendered value (0 = unlimited)",
    )
    p.add_argument("--output", choices=["stdout", "stderr", "log"], default=None)
    p.add_argument("--log-level", default=None, help="Diagnostics log level")
    p.add_argument("-m", dest="module", default=None, help="Run a library module")
    p.add_argument("--version", action="version", version=f"calltrace {__version__}")
    p.add_argument("program", nargs="?", help="Script to run")
    p.add_argument("args", nargs=argparse.REMAINDER, help="Program arguments")
    return p


def _settings_from_args(ns: argparse.Namespace) -> TraceSettings:
    return load_settings(
        ns.config,
        serializer=ns.serializer,
        indent=ns.indent,
        max_length=ns.max_length,
        output=ns.output,
        logging={"level": ns.log_level} if ns.log_level else None,
    )


def _exit_code(code: Any) -> int:
    """Map a SystemExit code the way the interpreter does."""
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    sys.stderr.write(f"{code}\n")
    return 1


def _run_program(ns: argparse.Namespace) -> None:
    if ns.module:
        argv = [ns.module] + ([ns.program] if ns.program else []) + ns.args
        sys.argv = argv
        runpy.run_module(ns.module, run_name="__main__", alter_sys=True)
        return

    script = os.path.abspath(ns.program)
    sys.argv = [ns.program, *ns.args]
    sys.path.insert(0, os.path.dirname(script))
    try:
        runpy.run_path(script, run_name="__main__")
    finally:
        sys.path.remove(os.path.dirname(script))


def run(ns: argparse.Namespace) -> int:
    """
    Trace the requested names and run the program.

    Returns:
        The program's exit code, or 2 when settings or names are invalid
    """
    try:
        tracer = Tracer(settings=_settings_from_args(ns))
    except TraceError as e:
        sys.stderr.write(f"calltrace: {e}\n")
        return EXIT_USAGE

    saved_argv = sys.argv[:]
    try:
        tracer.trace(*ns.trace)
        tracer.lg.debug("running", extra={"names": list(tracer.names)})
        _run_program(ns)
    except TraceError as e:
        sys.stderr.write(f"calltrace: {e}\n")
        return EXIT_USAGE
    except SystemExit as e:
        return _exit_code(e.code)
    finally:
        sys.argv = saved_argv
        tracer.untrace()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the calltrace CLI."""
    parser = build_parser()
    ns = parser.parse_args(argv)
    if not ns.module and not ns.program:
        parser.error("a script or -m MODULE is required")
    return run(ns)


if __name__ == "__main__":
    sys.exit(main())

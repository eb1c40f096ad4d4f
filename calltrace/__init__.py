from importlib.metadata import PackageNotFoundError, version

from .config import LoggingSettings, TraceSettings, load_settings
from .depth import current_depth
from .exceptions import (
    AlreadyInstrumentedError,
    ConfigError,
    InvalidNameError,
    InvalidTargetError,
    NotInstrumentedError,
    PathNotFoundError,
    TraceError,
)
from .formatting import TraceFormatter
from .hooks import (
    DefaultHooks,
    LoggerSink,
    StreamSink,
    default_after,
    default_before,
    noop,
)
from .namespace import Namespace
from .registry import TraceEntry, TraceRegistry
from .resolver import (
    DottedPathResolver,
    Instrumentable,
    ModuleResolver,
    PathResolver,
    SlotResolver,
)
from .tracer import (
    Tracer,
    after,
    before,
    get_tracer,
    instrument,
    is_instrumented,
    reset_tracer,
    revert,
    trace,
    untrace,
)
from .wrapper import CallArgs

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("calltrace")
except PackageNotFoundError:
    # Package not installed (development mode)
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    # Tracing
    "Tracer",
    "get_tracer",
    "reset_tracer",
    "instrument",
    "trace",
    "before",
    "after",
    "revert",
    "untrace",
    "is_instrumented",
    "current_depth",
    # Hooks and output
    "CallArgs",
    "DefaultHooks",
    "TraceFormatter",
    "StreamSink",
    "LoggerSink",
    "default_before",
    "default_after",
    "noop",
    # Namespaces and resolution
    "Namespace",
    "PathResolver",
    "DottedPathResolver",
    "ModuleResolver",
    "SlotResolver",
    "Instrumentable",
    # Registry
    "TraceEntry",
    "TraceRegistry",
    # Settings
    "TraceSettings",
    "LoggingSettings",
    "load_settings",
    # Exceptions
    "TraceError",
    "InvalidNameError",
    "PathNotFoundError",
    "InvalidTargetError",
    "AlreadyInstrumentedError",
    "NotInstrumentedError",
    "ConfigError",
]

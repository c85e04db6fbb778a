"""Find, classify and stop local Node.js development servers."""

from .controller import DevServerController, ProcessView
from .errors import ErrorKind, SlayNodeError
from .models import ProcessRecord, ServerCategory, ServerDescriptor
from .process_killer import ProcessKiller
from .process_monitor import ProcessMonitor

__version__ = "0.1.0"

__all__ = [
    "DevServerController",
    "ErrorKind",
    "ProcessKiller",
    "ProcessMonitor",
    "ProcessRecord",
    "ProcessView",
    "ServerCategory",
    "ServerDescriptor",
    "SlayNodeError",
    "__version__",
]

"""
secproto - Interactive security protocol CLI

Runs a fixed sequence of host and network security tools (intrusion
detection, network analysis, vulnerability scanning, file integrity,
rootkit detection, malware scanning, traffic capture) under operator
control, with a live progress bar per tool and a plain-text execution
log and summary report.

Authorized use only - run it on hosts and networks you are allowed to test.
"""

__version__ = "0.1.0"
__author__ = "secproto contributors"
__license__ = "MIT"

from secproto.models import ExecutionResult, ExecutionStatus, ToolSelection
from secproto.orchestrator import Orchestrator
from secproto.utils.process import CommandRunner, ProcessError

__all__ = [
    "ExecutionResult",
    "ExecutionStatus",
    "ToolSelection",
    "Orchestrator",
    "CommandRunner",
    "ProcessError",
]

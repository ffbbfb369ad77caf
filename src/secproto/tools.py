"""
Catalogue of the security tools secproto can run.

The catalogue order is the order tools are prompted for and executed in.
Command lines are built from fixed templates; only the Nmap target and the
tshark capture duration come from the operator. Values taken from settings are
shell-quoted.
"""

import shlex
from typing import Callable, List, Optional

from secproto.config import SecProtoSettings
from secproto.models import ToolSelection

CommandBuilder = Callable[[ToolSelection, SecProtoSettings], str]
DurationEstimator = Callable[[ToolSelection, SecProtoSettings], int]


class ToolSpec:
    """Description of one external tool and how to invoke it."""

    def __init__(self,
                 key: str,
                 name: str,
                 question: str,
                 command_builder: CommandBuilder,
                 duration_estimator: Optional[DurationEstimator] = None,
                 parameter: Optional[str] = None,
                 parameter_question: Optional[str] = None):
        self.key = key
        self.name = name
        self.question = question
        self.command_builder = command_builder
        self.duration_estimator = duration_estimator
        self.parameter = parameter
        self.parameter_question = parameter_question

    def __repr__(self) -> str:
        return f"ToolSpec({self.key})"

    def build_command(self, selection: ToolSelection, settings: SecProtoSettings) -> str:
        """Build the exact shell command line for this tool."""
        return self.command_builder(selection, settings)

    def estimated_duration_ms(self, selection: ToolSelection, settings: SecProtoSettings) -> int:
        """Expected run time, used only to drive the progress bar."""
        if self.duration_estimator is None:
            return settings.default_estimated_duration_ms
        return self.duration_estimator(selection, settings)


TOOL_CATALOGUE: List[ToolSpec] = [
    # Intrusion detection
    ToolSpec(
        key="suricata",
        name="Suricata",
        question="Do you want to run Suricata for intrusion detection?",
        command_builder=lambda sel, cfg: (
            f"suricata -c {shlex.quote(cfg.suricata_config)} -i {shlex.quote(cfg.interface)}"
        ),
    ),

    # Network analysis
    ToolSpec(
        key="zeek",
        name="Zeek",
        question="Do you want to run Zeek for network analysis?",
        command_builder=lambda sel, cfg: f"zeek -i {shlex.quote(cfg.interface)}",
    ),

    # Vulnerability scanning - needs a target from the operator
    ToolSpec(
        key="nmap",
        name="Nmap",
        question="Do you want to run an Nmap scan for vulnerability assessment?",
        command_builder=lambda sel, cfg: f"nmap -sV -O {sel.nmap_target}",
        parameter="nmap_target",
        parameter_question="Enter the IP range for Nmap scan (e.g., 192.168.1.0/24):",
    ),

    # File integrity
    ToolSpec(
        key="tripwire",
        name="Tripwire",
        question="Do you want to run Tripwire for file integrity checking?",
        command_builder=lambda sel, cfg: "tripwire --check",
    ),

    # Rootkit detection
    ToolSpec(
        key="rkhunter",
        name="rkhunter",
        question="Do you want to run rkhunter for rootkit detection?",
        command_builder=lambda sel, cfg: "rkhunter --check",
    ),

    # Malware scanning
    ToolSpec(
        key="clamav",
        name="ClamAV",
        question="Do you want to run ClamAV for malware scanning?",
        command_builder=lambda sel, cfg: f"clamscan -r {shlex.quote(cfg.clamscan_root)}",
    ),

    # Traffic capture - runs for exactly the requested duration
    ToolSpec(
        key="tshark",
        name="tshark",
        question="Do you want to capture network traffic with tshark?",
        command_builder=lambda sel, cfg: (
            f"tshark -i {shlex.quote(cfg.interface)} -a duration:{sel.capture_duration} "
            f"-w {shlex.quote(cfg.capture_file)}"
        ),
        duration_estimator=lambda sel, cfg: sel.capture_duration * 1000,
        parameter="capture_duration",
        parameter_question="Enter the duration for tshark capture (in seconds):",
    ),
]


def get_tool(key: str) -> Optional[ToolSpec]:
    """Look up a tool by key."""
    for tool in TOOL_CATALOGUE:
        if tool.key == key:
            return tool
    return None

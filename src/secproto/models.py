"""
Data models for a security protocol run.

These Pydantic models are the only structured data that flows through
secproto: the operator's tool selection, built once from the prompts, and
one execution result per tool that ran.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ToolSelection(BaseModel):
    """Which tools the operator chose to run, plus their parameters."""

    model_config = ConfigDict(frozen=True)

    suricata: bool = Field(False, description="Run Suricata intrusion detection")
    zeek: bool = Field(False, description="Run Zeek network analysis")
    nmap: bool = Field(False, description="Run an Nmap vulnerability scan")
    tripwire: bool = Field(False, description="Run a Tripwire integrity check")
    rkhunter: bool = Field(False, description="Run rkhunter rootkit detection")
    clamav: bool = Field(False, description="Run a ClamAV malware scan")
    tshark: bool = Field(False, description="Capture traffic with tshark")

    nmap_target: Optional[str] = Field(
        None, description="IP, CIDR range or hostname to scan"
    )
    capture_duration: Optional[int] = Field(
        None, gt=0, description="tshark capture duration in seconds"
    )

    @model_validator(mode="after")
    def _check_parameters(self) -> "ToolSelection":
        if self.nmap and not self.nmap_target:
            raise ValueError("nmap_target is required when nmap is selected")
        if self.tshark and self.capture_duration is None:
            raise ValueError("capture_duration is required when tshark is selected")
        return self

    def is_enabled(self, key: str) -> bool:
        """Check whether the tool with the given key was selected."""
        return bool(getattr(self, key))


class ExecutionStatus(str, Enum):
    """Outcome of a single tool run."""
    SUCCESS = "Success"
    FAILED = "Failed"


class ExecutionResult(BaseModel):
    """Record of one tool invocation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Tool display name")
    status: ExecutionStatus = Field(..., description="Success or Failed")
    duration_ms: Optional[int] = Field(
        None, ge=0, description="Wall-clock duration, successful runs only"
    )
    error: Optional[str] = Field(None, description="Error message, failed runs only")

    @classmethod
    def success(cls, name: str, duration_ms: int) -> "ExecutionResult":
        return cls(name=name, status=ExecutionStatus.SUCCESS, duration_ms=duration_ms)

    @classmethod
    def failed(cls, name: str, error: str) -> "ExecutionResult":
        return cls(name=name, status=ExecutionStatus.FAILED, error=error)

    @property
    def succeeded(self) -> bool:
        return self.status == ExecutionStatus.SUCCESS

    def report_line(self) -> str:
        """Format the result as a single report line."""
        if self.duration_ms is None:
            return f"{self.name}: {self.status.value}"
        return f"{self.name}: {self.status.value} ({self.duration_ms}ms)"

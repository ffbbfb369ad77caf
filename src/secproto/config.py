"""
Configuration management for secproto.

Uses Pydantic Settings for environment variable loading and validation.
Supports .env files and SECPROTO_ prefixed environment variables.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ESTIMATED_DURATION_MS = 8000


class SecProtoSettings(BaseSettings):
    """Main configuration class for secproto."""

    model_config = SettingsConfigDict(
        env_prefix="SECPROTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Output files, truncated at the start of every run
    log_file: Path = Field(
        default=Path("security_protocol_log.txt"),
        description="Execution log with raw command text, output and timing",
    )
    report_file: Path = Field(
        default=Path("security_protocol_report.txt"),
        description="Summary report with one line per tool",
    )

    # Tool parameters
    interface: str = Field(
        default="eth0", description="Network interface for sniffing tools"
    )
    suricata_config: str = Field(
        default="/etc/suricata/suricata.yaml",
        description="Suricata configuration file",
    )
    clamscan_root: str = Field(
        default="/", description="Directory tree scanned by ClamAV"
    )
    capture_file: str = Field(
        default="captured_traffic.pcap", description="tshark capture output file"
    )

    # Progress
    default_estimated_duration_ms: int = Field(
        default=DEFAULT_ESTIMATED_DURATION_MS,
        gt=0,
        description="Estimated run time used for the progress bar",
    )
    progress_interval_ms: int = Field(
        default=100, gt=0, description="Progress bar refresh interval"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    debug_log_file: Optional[Path] = Field(
        None, description="Diagnostic log file, always written at DEBUG level"
    )


@lru_cache(maxsize=1)
def get_settings() -> SecProtoSettings:
    """Get the process-wide settings instance."""
    return SecProtoSettings()

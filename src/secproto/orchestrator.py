"""
Orchestrator for a security protocol run.

Runs the selected tools strictly one at a time in catalogue order. A tool
that fails is recorded as Failed and the run moves on to the next tool;
nothing a single tool does can abort the session.
"""

import time
from typing import List, Optional

from rich.console import Console

from secproto.config import SecProtoSettings, get_settings
from secproto.console import console as default_console
from secproto.logging_config import get_logger, log_tool_failure, log_tool_skip
from secproto.models import ExecutionResult, ToolSelection
from secproto.prompts import PromptCollector
from secproto.reporting import ExecutionLog, ExecutionReport
from secproto.tools import TOOL_CATALOGUE, ToolSpec
from secproto.utils.process import CommandRunner, ProcessError

logger = get_logger(__name__)

COMPLETION_MESSAGE = (
    "Security protocol execution completed. "
    "Check the log and report files for details."
)


class Orchestrator:
    """Sequences tool runs and owns the log and report writers."""

    def __init__(self,
                 settings: Optional[SecProtoSettings] = None,
                 console: Optional[Console] = None,
                 runner: Optional[CommandRunner] = None,
                 tools: Optional[List[ToolSpec]] = None):
        self.settings = settings or get_settings()
        self.console = console or default_console
        self.tools = tools if tools is not None else TOOL_CATALOGUE

        self.log = ExecutionLog(self.settings.log_file)
        self.report = ExecutionReport(self.settings.report_file)
        self.runner = runner or CommandRunner(
            self.log,
            console=self.console,
            progress_interval_ms=self.settings.progress_interval_ms,
        )

        logger.debug(f"Orchestrator initialized with {len(self.tools)} tools")

    def start_files(self) -> None:
        """Truncate the log and report files and write their headers."""
        self.log.start()
        self.report.start()

    async def run_session(self, collector: Optional[PromptCollector] = None) -> List[ExecutionResult]:
        """
        Run a full session: reset files, prompt, run tools, write the report.

        Args:
            collector: Source of the operator's tool selection

        Returns:
            Results for every tool that ran, in invocation order
        """
        self.start_files()

        collector = collector or PromptCollector(console=self.console, tools=self.tools)
        selection = collector.collect()

        results = await self.run_tools(selection)

        self.report.write_summary(results)
        self.console.print(COMPLETION_MESSAGE, soft_wrap=True)
        return results

    async def run_tools(self, selection: ToolSelection) -> List[ExecutionResult]:
        """Run every selected tool in catalogue order."""
        results: List[ExecutionResult] = []
        start_time = time.monotonic()

        for tool in self.tools:
            if not selection.is_enabled(tool.key):
                log_tool_skip(tool.name)
                continue

            logger.info(f"Running {tool.name}")
            results.append(await self.execute(tool, selection))

        failed = sum(1 for r in results if not r.succeeded)
        logger.info(
            f"Ran {len(results)} tools in {time.monotonic() - start_time:.2f}s, "
            f"{failed} failed"
        )
        return results

    async def execute(self, tool: ToolSpec, selection: ToolSelection) -> ExecutionResult:
        """Run one tool and convert its outcome into an ExecutionResult."""
        command = tool.build_command(selection, self.settings)
        estimated_duration_ms = tool.estimated_duration_ms(selection, self.settings)

        try:
            output = await self.runner.run(command, estimated_duration_ms)
        except ProcessError as e:
            log_tool_failure(tool.name, str(e))
            return ExecutionResult.failed(tool.name, str(e))

        logger.info(f"{tool.name} completed in {output.duration_ms}ms")
        return ExecutionResult.success(tool.name, output.duration_ms)

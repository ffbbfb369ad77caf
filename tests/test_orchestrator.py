"""Tests for orchestrator functionality."""

import asyncio
import io
import itertools
from unittest.mock import AsyncMock, Mock

import pytest
from rich.console import Console

from secproto.config import SecProtoSettings
from secproto.models import ExecutionStatus, ToolSelection
from secproto.orchestrator import COMPLETION_MESSAGE, Orchestrator
from secproto.reporting import LOG_HEADER, REPORT_HEADER
from secproto.tools import TOOL_CATALOGUE, ToolSpec
from secproto.utils.process import CommandOutput, CommandRunner, ProcessError

TOOL_KEYS = [tool.key for tool in TOOL_CATALOGUE]

EXPECTED_COMMANDS = {
    "suricata": "suricata -c /etc/suricata/suricata.yaml -i eth0",
    "zeek": "zeek -i eth0",
    "nmap": "nmap -sV -O 192.168.1.0/24",
    "tripwire": "tripwire --check",
    "rkhunter": "rkhunter --check",
    "clamav": "clamscan -r /",
    "tshark": "tshark -i eth0 -a duration:10 -w captured_traffic.pcap",
}


def make_selection(**enabled):
    """Build a selection with parameters filled in for nmap and tshark."""
    return ToolSelection(nmap_target="192.168.1.0/24", capture_duration=10, **enabled)


class TestOrchestrator:
    """Test Orchestrator with a mocked command runner."""

    @pytest.fixture
    def settings(self, tmp_path):
        return SecProtoSettings(
            log_file=tmp_path / "security_protocol_log.txt",
            report_file=tmp_path / "security_protocol_report.txt",
        )

    @pytest.fixture
    def mock_runner(self):
        runner = Mock(spec=CommandRunner)
        runner.run = AsyncMock(return_value=CommandOutput(stdout="", stderr="", duration_ms=42))
        return runner

    @pytest.fixture
    def orchestrator(self, settings, mock_runner):
        return Orchestrator(
            settings=settings,
            console=Console(file=io.StringIO()),
            runner=mock_runner,
        )

    def invoked_commands(self, runner):
        return [call.args[0] for call in runner.run.await_args_list]

    def test_orchestrator_creation(self, orchestrator, settings):
        assert orchestrator.tools == TOOL_CATALOGUE
        assert orchestrator.log.path == settings.log_file
        assert orchestrator.report.path == settings.report_file

    def test_default_runner_writes_to_owned_log(self, settings):
        orchestrator = Orchestrator(settings=settings, console=Console(file=io.StringIO()))

        assert isinstance(orchestrator.runner, CommandRunner)
        assert orchestrator.runner.log is orchestrator.log

    def test_all_tools_run_in_canonical_order(self, orchestrator, mock_runner):
        selection = make_selection(**{key: True for key in TOOL_KEYS})

        results = asyncio.run(orchestrator.run_tools(selection))

        assert self.invoked_commands(mock_runner) == [EXPECTED_COMMANDS[k] for k in TOOL_KEYS]
        assert [r.name for r in results] == [
            "Suricata", "Zeek", "Nmap", "Tripwire", "rkhunter", "ClamAV", "tshark"
        ]
        assert all(r.status == ExecutionStatus.SUCCESS for r in results)
        assert all(r.duration_ms == 42 for r in results)

    @pytest.mark.parametrize("flags", list(itertools.product([False, True], repeat=7)))
    def test_exactly_enabled_tools_run(self, orchestrator, mock_runner, flags):
        enabled = dict(zip(TOOL_KEYS, flags))
        selection = make_selection(**enabled)

        results = asyncio.run(orchestrator.run_tools(selection))

        expected = [EXPECTED_COMMANDS[k] for k in TOOL_KEYS if enabled[k]]
        assert self.invoked_commands(mock_runner) == expected
        assert len(results) == len(expected)

    def test_failure_does_not_stop_later_tools(self, orchestrator, mock_runner):
        mock_runner.run.side_effect = [
            ProcessError(EXPECTED_COMMANDS["suricata"], 1, "", "no such interface"),
            CommandOutput(stdout="ok", stderr="", duration_ms=120),
        ]
        selection = make_selection(suricata=True, zeek=True)

        results = asyncio.run(orchestrator.run_tools(selection))

        assert [(r.name, r.status) for r in results] == [
            ("Suricata", ExecutionStatus.FAILED),
            ("Zeek", ExecutionStatus.SUCCESS),
        ]
        assert "exit code 1" in results[0].error
        assert results[0].duration_ms is None
        assert results[1].duration_ms == 120

    def test_every_tool_failing_still_runs_all(self, orchestrator, mock_runner):
        mock_runner.run.side_effect = ProcessError("x", 127, "", "not found")
        selection = make_selection(**{key: True for key in TOOL_KEYS})

        results = asyncio.run(orchestrator.run_tools(selection))

        assert mock_runner.run.await_count == 7
        assert all(r.status == ExecutionStatus.FAILED for r in results)

    def test_tshark_duration_drives_command_and_estimate(self, orchestrator, mock_runner):
        selection = ToolSelection(tshark=True, capture_duration=10)

        asyncio.run(orchestrator.run_tools(selection))

        mock_runner.run.assert_awaited_once_with(
            "tshark -i eth0 -a duration:10 -w captured_traffic.pcap", 10000
        )

    def test_other_tools_use_default_estimate(self, orchestrator, mock_runner):
        selection = ToolSelection(rkhunter=True)

        asyncio.run(orchestrator.run_tools(selection))

        mock_runner.run.assert_awaited_once_with("rkhunter --check", 8000)

    def test_nmap_target_interpolated(self, orchestrator, mock_runner):
        selection = ToolSelection(nmap=True, nmap_target="10.10.10.10 scanme.example.org")

        asyncio.run(orchestrator.run_tools(selection))

        assert self.invoked_commands(mock_runner) == ["nmap -sV -O 10.10.10.10 scanme.example.org"]

    def test_interface_setting_applies_to_sniffers(self, tmp_path, mock_runner):
        settings = SecProtoSettings(
            log_file=tmp_path / "log.txt",
            report_file=tmp_path / "report.txt",
            interface="wlan0",
        )
        orchestrator = Orchestrator(settings=settings, console=Console(file=io.StringIO()), runner=mock_runner)
        selection = make_selection(suricata=True, zeek=True, tshark=True)

        asyncio.run(orchestrator.run_tools(selection))

        assert self.invoked_commands(mock_runner) == [
            "suricata -c /etc/suricata/suricata.yaml -i wlan0",
            "zeek -i wlan0",
            "tshark -i wlan0 -a duration:10 -w captured_traffic.pcap",
        ]

    def test_execute_never_raises_process_error(self, orchestrator, mock_runner):
        mock_runner.run.side_effect = ProcessError("tripwire --check", 8, "", "")
        tripwire = TOOL_CATALOGUE[3]

        result = asyncio.run(orchestrator.execute(tripwire, ToolSelection(tripwire=True)))

        assert result.name == "Tripwire"
        assert result.status == ExecutionStatus.FAILED
        assert result.error == "Command failed with exit code 8: tripwire --check"


class TestRunSession:
    """Test full sessions, from file setup to the written report."""

    @pytest.fixture
    def settings(self, tmp_path):
        return SecProtoSettings(
            log_file=tmp_path / "security_protocol_log.txt",
            report_file=tmp_path / "security_protocol_report.txt",
        )

    def make_collector(self, selection):
        collector = Mock()
        collector.collect.return_value = selection
        return collector

    def test_all_no_spawns_nothing(self, settings):
        runner = Mock(spec=CommandRunner)
        runner.run = AsyncMock()
        output = io.StringIO()
        orchestrator = Orchestrator(settings=settings, console=Console(file=output, width=200), runner=runner)

        results = asyncio.run(orchestrator.run_session(self.make_collector(ToolSelection())))

        assert results == []
        runner.run.assert_not_called()
        assert settings.report_file.read_text() == f"{REPORT_HEADER}\n"
        assert settings.log_file.read_text() == f"{LOG_HEADER}\n"
        assert COMPLETION_MESSAGE in output.getvalue()

    def test_completion_message_not_wrapped_on_narrow_terminal(self, settings):
        runner = Mock(spec=CommandRunner)
        runner.run = AsyncMock()
        output = io.StringIO()
        orchestrator = Orchestrator(settings=settings, console=Console(file=output, width=40), runner=runner)

        asyncio.run(orchestrator.run_session(self.make_collector(ToolSelection())))

        assert f"{COMPLETION_MESSAGE}\n" in output.getvalue()

    def test_files_truncated_before_prompting(self, settings):
        settings.log_file.write_text("old log\n")
        settings.report_file.write_text("old report\n")

        def collect():
            # Headers are already in place when the operator is asked
            assert settings.log_file.read_text() == f"{LOG_HEADER}\n"
            assert settings.report_file.read_text() == f"{REPORT_HEADER}\n"
            return ToolSelection()

        collector = Mock()
        collector.collect.side_effect = collect
        runner = Mock(spec=CommandRunner)
        runner.run = AsyncMock()
        orchestrator = Orchestrator(settings=settings, console=Console(file=io.StringIO()), runner=runner)

        asyncio.run(orchestrator.run_session(collector))

        collector.collect.assert_called_once()

    def test_report_summarises_results(self, settings):
        runner = Mock(spec=CommandRunner)
        runner.run = AsyncMock(side_effect=[
            ProcessError("suricata", 1, "", ""),
            CommandOutput(stdout="", stderr="", duration_ms=250),
        ])
        orchestrator = Orchestrator(settings=settings, console=Console(file=io.StringIO()), runner=runner)

        asyncio.run(orchestrator.run_session(self.make_collector(ToolSelection(suricata=True, zeek=True))))

        assert settings.report_file.read_text().splitlines() == [
            REPORT_HEADER,
            "Suricata: Failed",
            "Zeek: Success (250ms)",
        ]

    def test_prompt_failure_propagates(self, settings):
        collector = Mock()
        collector.collect.side_effect = EOFError()
        orchestrator = Orchestrator(settings=settings, console=Console(file=io.StringIO()), runner=Mock())

        with pytest.raises(EOFError):
            asyncio.run(orchestrator.run_session(collector))

    def test_real_processes_continue_after_failure(self, settings):
        tools = [
            ToolSpec(key="suricata", name="Failing", question="?", command_builder=lambda s, c: "exit 2"),
            ToolSpec(key="zeek", name="Passing", question="?", command_builder=lambda s, c: "echo ok"),
        ]
        console = Console(file=io.StringIO())
        orchestrator = Orchestrator(settings=settings, console=console, tools=tools)
        orchestrator.runner.progress_factory = lambda command: Mock()

        results = asyncio.run(
            orchestrator.run_session(self.make_collector(ToolSelection(suricata=True, zeek=True)))
        )

        assert [(r.name, r.status) for r in results] == [
            ("Failing", ExecutionStatus.FAILED),
            ("Passing", ExecutionStatus.SUCCESS),
        ]
        log = settings.log_file.read_text()
        assert log.startswith(f"{LOG_HEADER}\n")
        assert "Executing: exit 2" in log
        assert "Executing: echo ok" in log
        report = settings.report_file.read_text().splitlines()
        assert report[0] == REPORT_HEADER
        assert report[1] == "Failing: Failed"
        assert report[2].startswith("Passing: Success (")

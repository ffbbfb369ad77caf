"""
Operator prompts for choosing which tools to run.

One yes/no question per tool in catalogue order, followed immediately by
the tool's parameter question when it has one and the answer was yes.
Parameter answers are validated before they are accepted; invalid input
is re-prompted.
"""

import ipaddress
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, InvalidResponse, Prompt

from secproto.console import console as default_console
from secproto.logging_config import get_logger
from secproto.models import ToolSelection
from secproto.tools import TOOL_CATALOGUE, ToolSpec

logger = get_logger(__name__)


def is_valid_target(target: str) -> bool:
    """Validate target IP, hostname, or CIDR range."""
    # Hostnames never start with a dash; such tokens would reach nmap as options
    if not target or target.startswith("-"):
        return False

    try:
        # Try as IP address
        ipaddress.ip_address(target)
        return True
    except ValueError:
        pass

    try:
        # Try as CIDR network
        ipaddress.ip_network(target, strict=False)
        return True
    except ValueError:
        pass

    # Hostnames and nmap octet ranges such as 10.0.0.1-20
    if target.replace(".", "").replace("-", "").isalnum():
        return True

    return False


class StreamInputMixin:
    """
    Read answers from an injected stream the way a terminal would.

    Rich hands back the raw line from a stream, newline included, and an
    empty string at end of input. Strip the newline so a blank line picks
    the default, and raise EOFError once the stream is exhausted so piped
    input can never loop on a re-prompt.
    """

    @classmethod
    def get_input(cls, console: Console, prompt, password: bool, stream: Optional[TextIO] = None) -> str:
        if stream is None:
            return super().get_input(console, prompt, password, stream=stream)

        line = console.input(prompt, password=password, stream=stream)
        if not line:
            raise EOFError("No more input")
        return line.rstrip("\r\n")


class YesNoPrompt(StreamInputMixin, Confirm):
    """Yes/no question for whether to run a tool."""


class TargetPrompt(StreamInputMixin, Prompt):
    """Prompt for one or more whitespace-separated scan targets."""

    validate_error_message = (
        "[prompt.invalid]Please enter an IP address, CIDR range or hostname"
    )

    def process_response(self, value: str) -> str:
        targets = value.split()
        if not targets or not all(is_valid_target(t) for t in targets):
            raise InvalidResponse(self.validate_error_message)
        return " ".join(targets)


class DurationPrompt(StreamInputMixin, IntPrompt):
    """Prompt for a capture duration in whole seconds."""

    validate_error_message = "[prompt.invalid]Please enter a number"

    def process_response(self, value: str) -> int:
        seconds = super().process_response(value)
        if seconds <= 0:
            raise InvalidResponse(
                "[prompt.invalid]Please enter a number of seconds greater than zero"
            )
        return seconds


PARAMETER_PROMPTS = {
    "nmap_target": TargetPrompt,
    "capture_duration": DurationPrompt,
}


class PromptCollector:
    """Asks the operator which tools to run and builds a ToolSelection."""

    def __init__(
        self,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        tools: Optional[List[ToolSpec]] = None,
    ):
        self.console = console or default_console
        self.stream = stream
        self.tools = tools if tools is not None else TOOL_CATALOGUE

    def collect(self) -> ToolSelection:
        """Run through every question and return the operator's answers."""
        answers: Dict[str, Any] = {}

        for tool in self.tools:
            answers[tool.key] = YesNoPrompt.ask(
                tool.question,
                default=True,
                console=self.console,
                stream=self.stream,
            )

            if answers[tool.key] and tool.parameter:
                answers[tool.parameter] = self._ask_parameter(tool)

        selection = ToolSelection(**answers)
        logger.debug(f"Collected tool selection: {selection.model_dump()}")
        return selection

    def _ask_parameter(self, tool: ToolSpec) -> Any:
        prompt_class = PARAMETER_PROMPTS[tool.parameter]
        return prompt_class.ask(
            tool.parameter_question,
            console=self.console,
            stream=self.stream,
        )

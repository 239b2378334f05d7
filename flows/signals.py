"""
Flow signals — how a function tells the orchestrator what to do next.

A function running inside a looping flow step cannot drive the loop
itself. Instead it sets a marker in its result's metadata and the
orchestrator reads it after the call:

  PromptInput   ask the user for input, showing the current response
  ContinueLoop  go round the current loop again
  ExitLoop      leave the loop; the value is an optional response to show
  StopFlow      terminate the whole flow

PromptInput and ExitLoop cannot both be set on one result: whichever is
set first wins and the other setter does nothing.
"""
from __future__ import annotations

import structlog
from typing import Optional

from flows.models import Flow
from functions.models import FunctionResult
from models.schemas import ChatHistory

logger = structlog.get_logger()

PROMPT_INPUT = "PromptInput"
CONTINUE_LOOP = "ContinueLoop"
EXIT_LOOP = "ExitLoop"
STOP_FLOW = "StopFlow"
MARKER_SET = "True"

CHAT_HISTORY = "_chatHistory"
CHAT_INPUT = "_chatInput"


# ──────────────────────────────────────────────────────────────
#  Setters
# ──────────────────────────────────────────────────────────────

def prompt_input(result: FunctionResult) -> None:
    """Ask the orchestrator to prompt the user for input with the current response."""
    if EXIT_LOOP in result.metadata:
        logger.debug("prompt_input_ignored", function=result.function_name, reason="exit_loop_set")
        return
    result.metadata[PROMPT_INPUT] = MARKER_SET


def exit_loop(result: FunctionResult, response: Optional[str] = None) -> None:
    """Leave the AtLeastOnce / ZeroOrMore loop. A non-empty response is shown to the user."""
    if PROMPT_INPUT in result.metadata:
        logger.debug("exit_loop_ignored", function=result.function_name, reason="prompt_input_set")
        return
    result.metadata[EXIT_LOOP] = response or ""


def continue_loop(result: FunctionResult) -> None:
    result.metadata[CONTINUE_LOOP] = MARKER_SET


def terminate_flow(result: FunctionResult) -> None:
    result.metadata[STOP_FLOW] = MARKER_SET


# ──────────────────────────────────────────────────────────────
#  Readers
# ──────────────────────────────────────────────────────────────

def is_prompt_input(result: FunctionResult) -> bool:
    return result.metadata.get(PROMPT_INPUT) == MARKER_SET


def is_continue_loop(result: FunctionResult) -> bool:
    return result.metadata.get(CONTINUE_LOOP) == MARKER_SET


def is_terminate_flow(result: FunctionResult) -> bool:
    return result.metadata.get(STOP_FLOW) == MARKER_SET


def get_exit_loop_response(result: FunctionResult) -> Optional[str]:
    """The exit response ("" when exiting silently), or None if ExitLoop is not set."""
    response = result.metadata.get(EXIT_LOOP)
    return response if isinstance(response, str) else None


def is_complete(result: FunctionResult, flow: Flow) -> bool:
    """True when every variable the flow provides is present in the metadata."""
    return all(name in result.metadata for name in flow.provides)


def get_chat_history(result: FunctionResult) -> Optional[ChatHistory]:
    text = result.metadata.get(CHAT_HISTORY)
    if isinstance(text, str) and text:
        return ChatHistory.deserialize(text)
    return None


def get_chat_input(result: FunctionResult) -> str:
    text = result.metadata.get(CHAT_INPUT)
    return text if isinstance(text, str) else ""

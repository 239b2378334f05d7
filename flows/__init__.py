"""
Flow signaling.

Functions running inside an orchestrated flow communicate control intent
(prompt the user, loop again, exit the loop, stop) by setting markers on
their FunctionResult; the orchestrator reads them back.
"""
from flows.models import Flow
from flows.signals import (
    prompt_input, exit_loop, continue_loop, terminate_flow,
    is_prompt_input, is_continue_loop, is_terminate_flow,
    get_exit_loop_response, is_complete,
    get_chat_history, get_chat_input,
)

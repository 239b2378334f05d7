"""
Flow Models — the minimal shape of a multi-step flow as seen by its steps.

Planning and orchestration live elsewhere; steps only need to know what
a flow promises to produce (provides) so they can tell whether the work
is done.
"""
from __future__ import annotations

from pydantic import BaseModel


class Flow(BaseModel):
    name: str
    goal: str = ""
    requires: list[str] = []                      # variables the flow needs before it starts
    provides: list[str] = []                      # variables the flow produces when complete

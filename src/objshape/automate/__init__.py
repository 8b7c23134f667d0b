# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
The automate function and its connection to the hosting platform.

- context: AutomationContext base class and run data
- local: File-backed project store and context
- inputs: FunctionInputs
- function: The conversion run
- runner: Harness that records the run's final status (local runs)
- speckle: Speckle Automate context and entry point (import directly)
"""

from .context import AutomationContext, AutomationRunData, ModelInfo, RunStatus
from .inputs import FunctionInputs
from .local import LocalAutomationContext, LocalProject
from .function import DirectShapeRun, RunResult, RunState, automate_function
from .runner import bootstrap, run_function

__all__ = [
    "AutomationContext",
    "AutomationRunData",
    "ModelInfo",
    "RunStatus",
    "FunctionInputs",
    "LocalAutomationContext",
    "LocalProject",
    "DirectShapeRun",
    "RunResult",
    "RunState",
    "automate_function",
    "bootstrap",
    "run_function",
]

"""stepforge steps — capability interfaces and the bundled workflow.

Usage::

    from stepforge.steps import registered_steps

    for s in registered_steps(Path(".")):
        print(s.key, s.description)
"""

from __future__ import annotations

from stepforge.steps.base import Step, StepAction, StepContext, step
from stepforge.steps.workflow import registered_steps, section_count

__all__ = [
    # Base
    "Step",
    "StepAction",
    "StepContext",
    "step",
    # Workflow
    "registered_steps",
    "section_count",
]

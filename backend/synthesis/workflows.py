import uuid
from collections.abc import Mapping

from models.app_model import Workflow, WorkflowStep
from models.pattern import RecognizedPattern
from synthesis.inference import infer_step_type

UNNAMED_WORKFLOW = "Unnamed Workflow"


def _build_step(index: int, step) -> WorkflowStep:
    # Steps are whatever the producer put in currentStep: a mapping or a bare label
    if isinstance(step, Mapping):
        name = step.get("name") or f"Step {index + 1}"
        config = dict(step)
    else:
        name = str(step) if step != "" else f"Step {index + 1}"
        config = {"value": step}
    return WorkflowStep(
        id=str(uuid.uuid4()),
        name=str(name),
        type=infer_step_type(step),
        config=config,
    )


def derive_workflows(patterns: list[RecognizedPattern]) -> list[Workflow]:
    """One workflow per pattern whose type mentions "workflow"."""
    workflows: list[Workflow] = []
    for pattern in patterns:
        if "workflow" not in pattern.type:
            continue
        metadata = pattern.metadata
        steps = metadata.get("steps")
        if not isinstance(steps, list):
            steps = []
        name = metadata.get("workflowName")
        if not isinstance(name, str) or not name:
            name = UNNAMED_WORKFLOW
        workflows.append(
            Workflow(
                id=str(uuid.uuid4()),
                name=name,
                steps=[_build_step(i, step) for i, step in enumerate(steps)],
                triggers=["manual"],
            )
        )
    return workflows

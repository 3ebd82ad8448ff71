"""
wfcompose - compose GitHub Actions workflows in Python.

Basic usage:

    from wfcompose import actions, commands, ctx, expr, job, on_push, workflow

    ci = (
        workflow("CI")
        .on(on_push(branches=["main"]))
        .job(
            "test",
            job()
            .runs_on("ubuntu-latest")
            .if_(expr.eq(ctx.github.repository, "acme/widgets"))
            .step(actions.checkout())
            .step(lambda s: s.id("version").run(commands.set_output("version", "1.2.3"))),
        )
    )

    # Write .github/workflows/ci.yml:
    generate([ci], ".github/workflows")

    # Or use the CLI with a `.github/wfcompose.py` config module:
    #   wfcompose generate
"""

from . import actions, commands, expr

from .config import (
    WorkflowOutput,
    define_workflows,
)
from .constants import PermissionAll, Runner, Shell
from .context import (
    Context,
    ContextPath,
    KnownNames,
    context,
    ctx,
    path,
)
from .errors import (
    CompositionError,
    JobError,
    StepError,
    StructuralError,
    ValidationError,
    WfcomposeError,
    WorkflowError,
    WriteError,
)
from .expr import Expression
from .generate import (
    check,
    check_from,
    generate,
    generate_from,
    generate_workflows,
    render_workflow_file,
)
from .jobs import Job, job
from .output import dbg, is_debug, set_debug
from .step import Step, step
from .triggers import (
    BoolInput,
    ChoiceInput,
    NumberInput,
    PullRequestTrigger,
    PushTrigger,
    ScheduleTrigger,
    StringInput,
    Trigger,
    WorkflowCallTrigger,
    WorkflowDispatchTrigger,
    WorkflowRunTrigger,
    on_pull_request,
    on_push,
    on_schedule,
    on_workflow_call,
    on_workflow_dispatch,
    on_workflow_run,
)
from .workflow import Workflow, workflow

__all__ = [
    # Modules
    "actions",
    "commands",
    "expr",
    # Context and expressions
    "Context",
    "ContextPath",
    "KnownNames",
    "context",
    "ctx",
    "path",
    "Expression",
    # Builders
    "Step",
    "step",
    "Job",
    "job",
    "Workflow",
    "workflow",
    # Triggers
    "Trigger",
    "PushTrigger",
    "PullRequestTrigger",
    "ScheduleTrigger",
    "WorkflowDispatchTrigger",
    "WorkflowCallTrigger",
    "WorkflowRunTrigger",
    "StringInput",
    "BoolInput",
    "NumberInput",
    "ChoiceInput",
    "on_push",
    "on_pull_request",
    "on_schedule",
    "on_workflow_dispatch",
    "on_workflow_call",
    "on_workflow_run",
    # Constants
    "Runner",
    "Shell",
    "PermissionAll",
    # Generation
    "WorkflowOutput",
    "define_workflows",
    "generate",
    "generate_from",
    "generate_workflows",
    "render_workflow_file",
    "check",
    "check_from",
    # Errors
    "WfcomposeError",
    "StructuralError",
    "JobError",
    "StepError",
    "WorkflowError",
    "ValidationError",
    "CompositionError",
    "WriteError",
    # Output
    "dbg",
    "set_debug",
    "is_debug",
]

__version__ = "0.1.0"

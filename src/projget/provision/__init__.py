"""Provisioning of local working copies.

Usage:
    ```python
    from projget.provision import ProvisioningStateMachine, provision_project

    machine = ProvisioningStateMachine(gateway, staging, registry, resolver)
    result = provision_project(machine, trigger, staging, descriptor, Path("demo"))
    ```
"""

from __future__ import annotations

from projget.provision.build import BuildTrigger, CommandBuildTrigger
from projget.provision.environment import (
    SelectionPrompt,
    environment_choices,
    select_environment,
)
from projget.provision.machine import ProvisioningStateMachine
from projget.provision.models import (
    BuildReport,
    BuildStatus,
    GetResult,
    OutcomeKind,
    ProvisionOutcome,
)
from projget.provision.workflow import provision_project

__all__ = [
    "BuildReport",
    "BuildStatus",
    "BuildTrigger",
    "CommandBuildTrigger",
    "GetResult",
    "OutcomeKind",
    "ProvisionOutcome",
    "ProvisioningStateMachine",
    "SelectionPrompt",
    "environment_choices",
    "provision_project",
    "select_environment",
]

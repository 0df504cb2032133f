from photonctl.workflows.host_provisioning import (
    HostProvisioner,
    HostProvisionResult,
    HostProvisionStatus,
    ProvisioningReport,
    build_host_specs,
)
from photonctl.workflows.task_poller import PollResult, PollState, TaskPoller, validate_task_id

__all__ = [
    "HostProvisionResult",
    "HostProvisionStatus",
    "HostProvisioner",
    "PollResult",
    "PollState",
    "ProvisioningReport",
    "TaskPoller",
    "build_host_specs",
    "validate_task_id",
]

"""tokenledger.workflow -- Temporal.io invocation gateway."""

from tokenledger.workflow.activities import TokenActivities as TokenActivities
from tokenledger.workflow.activities import resolve_timestamp as resolve_timestamp
from tokenledger.workflow.types import InvocationInput as InvocationInput
from tokenledger.workflow.types import InvocationOutput as InvocationOutput
from tokenledger.workflow.worker import build_worker as build_worker
from tokenledger.workflow.worker import run_worker as run_worker

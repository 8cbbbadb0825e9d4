"""Worker for the token invocation gateway.

Starts a Temporal worker with the invocation activity registered on the
gateway task queue.

Usage::

    import asyncio
    from tokenledger.infra.memory_adapter import InMemoryLedger
    from tokenledger.workflow.worker import run_worker

    asyncio.run(run_worker(InMemoryLedger()))
"""

from __future__ import annotations

from temporalio.client import Client
from temporalio.worker import Worker

from tokenledger.infra.config import WorkerConfig
from tokenledger.infra.protocols import LedgerHost
from tokenledger.token.contract import TokenContract
from tokenledger.workflow.activities import TokenActivities


def build_worker(
    client: Client,
    ledger: LedgerHost,
    *,
    contract: TokenContract | None = None,
    config: WorkerConfig | None = None,
) -> Worker:
    """Worker with the gateway activity registered."""
    cfg = config if config is not None else WorkerConfig()
    activities = TokenActivities(ledger, contract)
    return Worker(
        client,
        task_queue=cfg.task_queue,
        activities=[activities.invoke_token_operation],
    )


async def run_worker(
    ledger: LedgerHost,
    *,
    contract: TokenContract | None = None,
    config: WorkerConfig | None = None,
) -> None:
    """Connect to Temporal and run the worker until interrupted."""
    cfg = config if config is not None else WorkerConfig()
    client = await Client.connect(cfg.target_host, namespace=cfg.namespace)
    worker = build_worker(client, ledger, contract=contract, config=cfg)
    await worker.run()

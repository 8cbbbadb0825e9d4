"""tokenledger.infra — host protocols, in-memory host and configuration."""

from tokenledger.infra.config import ADMIN_SENTINEL as ADMIN_SENTINEL
from tokenledger.infra.config import NULL_ADDRESS as NULL_ADDRESS
from tokenledger.infra.config import TASK_QUEUE as TASK_QUEUE
from tokenledger.infra.config import TRANSFER_EVENT as TRANSFER_EVENT
from tokenledger.infra.config import TokenConfig as TokenConfig
from tokenledger.infra.config import WorkerConfig as WorkerConfig
from tokenledger.infra.memory_adapter import CommittedEvent as CommittedEvent
from tokenledger.infra.memory_adapter import InMemoryInvocation as InMemoryInvocation
from tokenledger.infra.memory_adapter import InMemoryLedger as InMemoryLedger
from tokenledger.infra.memory_adapter import StaticIdentity as StaticIdentity
from tokenledger.infra.protocols import ClientIdentity as ClientIdentity
from tokenledger.infra.protocols import EventSink as EventSink
from tokenledger.infra.protocols import InvocationContext as InvocationContext
from tokenledger.infra.protocols import LedgerHost as LedgerHost
from tokenledger.infra.protocols import StateStore as StateStore

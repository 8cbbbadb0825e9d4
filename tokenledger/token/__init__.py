"""tokenledger.token — the balance/state-mutation engine and its public surface."""

from tokenledger.token.contract import TokenContract as TokenContract
from tokenledger.token.history import TransactionRecord as TransactionRecord
from tokenledger.token.policy import AuthorizationPolicy as AuthorizationPolicy
from tokenledger.token.policy import Capability as Capability
from tokenledger.token.policy import CapabilityPolicy as CapabilityPolicy
from tokenledger.token.policy import OrganizationPolicy as OrganizationPolicy
from tokenledger.token.state import StateAccessor as StateAccessor
from tokenledger.token.transfer import BalanceMove as BalanceMove

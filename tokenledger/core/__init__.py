"""tokenledger.core — result values, errors, arithmetic, keys and codecs."""

from tokenledger.core.arithmetic import MAX_SAFE_INTEGER as MAX_SAFE_INTEGER
from tokenledger.core.arithmetic import IntegerDomain as IntegerDomain
from tokenledger.core.errors import AccountError as AccountError
from tokenledger.core.errors import ArithmeticFaultError as ArithmeticFaultError
from tokenledger.core.errors import ConservationViolationError as ConservationViolationError
from tokenledger.core.errors import CorruptStateError as CorruptStateError
from tokenledger.core.errors import ErrorCode as ErrorCode
from tokenledger.core.errors import FieldViolation as FieldViolation
from tokenledger.core.errors import InsufficientFundsError as InsufficientFundsError
from tokenledger.core.errors import InvalidAmountError as InvalidAmountError
from tokenledger.core.errors import LifecycleError as LifecycleError
from tokenledger.core.errors import MissingStateError as MissingStateError
from tokenledger.core.errors import PersistenceError as PersistenceError
from tokenledger.core.errors import TokenError as TokenError
from tokenledger.core.errors import UnauthorizedError as UnauthorizedError
from tokenledger.core.errors import ValidationError as ValidationError
from tokenledger.core.keys import SEPARATOR as SEPARATOR
from tokenledger.core.keys import create_composite_key as create_composite_key
from tokenledger.core.keys import split_composite_key as split_composite_key
from tokenledger.core.result import Err as Err
from tokenledger.core.result import Ok as Ok
from tokenledger.core.result import Result as Result
from tokenledger.core.result import unwrap as unwrap
from tokenledger.core.serialization import canonical_bytes as canonical_bytes
from tokenledger.core.serialization import decode_int as decode_int
from tokenledger.core.serialization import encode_int as encode_int
from tokenledger.core.types import UtcDatetime as UtcDatetime

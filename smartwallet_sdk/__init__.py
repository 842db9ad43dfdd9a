"""
SmartWallet SDK - prepare, sign, submit and track smart-wallet calls.
"""
from .version import __version__
from .client import SmartWalletClient
from .config import NetworkConfig, WalletConfig
from .authorization import AuthorizationDescriptor, ValidationMode, root_owner_authorization
from .encoder import (
    FunctionSignature, decode_function_call, encode_delegated_call,
    encode_execute, encode_execute_with_runtime_validation, encode_function_call
)
from .exceptions import (
    SmartWalletError, ConfigurationError, EncodingError, PreparationError,
    SigningError, SubmissionError, PollError, PollTimeoutError, PollCancelledError
)
from .models import (
    AccountInfo, Call, CallStatus, CallStatusCode, Capabilities, PaymasterService,
    SinglePreparedCalls, BatchPreparedCalls, SingleSignedCalls, BatchSignedCalls,
    SubmissionResult, explorer_link
)
from .poller import StatusPoller
from .signer import LocalSigner, Signer
from .signing import sign_prepared_calls

__all__ = [
    "SmartWalletClient",
    "WalletConfig",
    "NetworkConfig",
    "AuthorizationDescriptor",
    "ValidationMode",
    "root_owner_authorization",
    "FunctionSignature",
    "encode_function_call",
    "decode_function_call",
    "encode_execute",
    "encode_execute_with_runtime_validation",
    "encode_delegated_call",
    "SmartWalletError",
    "ConfigurationError",
    "EncodingError",
    "PreparationError",
    "SigningError",
    "SubmissionError",
    "PollError",
    "PollTimeoutError",
    "PollCancelledError",
    "AccountInfo",
    "Call",
    "CallStatus",
    "CallStatusCode",
    "Capabilities",
    "PaymasterService",
    "SinglePreparedCalls",
    "BatchPreparedCalls",
    "SingleSignedCalls",
    "BatchSignedCalls",
    "SubmissionResult",
    "explorer_link",
    "StatusPoller",
    "LocalSigner",
    "Signer",
    "sign_prepared_calls",
    "__version__",
]

"""Decoding of packed update-engine error codes.

An error code packs a primary cause in the low bits and independent
condition flags in bits 28-31. The layout is fixed by the deployed update
clients and must not change:

    31        28 27                                0
    ┌─┬─┬─┬─┬───────────────────────────────────────┐
    │D│R│I│U│            primary identifier          │
    └─┴─┴─┴─┴───────────────────────────────────────┘
     │ │ │ └─ TestOmahaUrlFlag
     │ │ └─── TestImageFlag
     │ └───── ResumedFlag
     └─────── DevModeFlag
"""

import logging
from types import MappingProxyType
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger("fleetstats.error_codes")

FLAG_BITS_START = 28
PRIMARY_MASK = (1 << FLAG_BITS_START) - 1

HTTP_RESPONSE_BASE = 2000
HTTP_RESPONSE_END = 3000

# Keep in sync with update_engine action_processor.h
ACTION_CODES = MappingProxyType({
    1: "Error",
    2: "OmahaRequestError",
    3: "OmahaResponseHandlerError",
    4: "FilesystemCopierError",
    5: "PostinstallRunnerError",
    6: "SetBootableFlagError",
    7: "InstallDeviceOpenError",
    8: "KernelDeviceOpenError",
    9: "DownloadTransferError",
    10: "PayloadHashMismatchError",
    11: "PayloadSizeMismatchError",
    12: "DownloadPayloadVerificationError",
    13: "DownloadNewPartitionInfoError",
    14: "DownloadWriteError",
    15: "NewRootfsVerificationError",
    16: "NewKernelVerificationError",
    17: "SignedDeltaPayloadExpectedError",
    18: "DownloadPayloadPubKeyVerificationError",
    19: "PostinstallBootedFromFirmwareB",
    20: "DownloadStateInitializationError",
    21: "DownloadInvalidMetadataMagicString",
    22: "DownloadSignatureMissingInManifest",
    23: "DownloadManifestParseError",
    24: "DownloadMetadataSignatureError",
    25: "DownloadMetadataSignatureVerificationError",
    26: "DownloadMetadataSignatureMismatch",
    27: "DownloadOperationHashVerificationError",
    28: "DownloadOperationExecutionError",
    29: "DownloadOperationHashMismatch",
    30: "OmahaRequestEmptyResponseError",
    31: "OmahaRequestXMLParseError",
    32: "DownloadInvalidMetadataSize",
    33: "DownloadInvalidMetadataSignature",
    34: "OmahaResponseInvalid",
    35: "OmahaUpdateIgnoredPerPolicy",
    36: "OmahaUpdateDeferredPerPolicy",
    37: "OmahaErrorInHTTPResponse",
    38: "DownloadOperationHashMissingError",
    39: "DownloadMetadataSignatureMissingError",
    40: "OmahaUpdateDeferredForBackoff",
    41: "PostinstallPowerwashError",
    42: "NewPCRPolicyVerificationError",
    43: "NewPCRPolicyHTTPError",
    44: "RollbackError",
    100: "DownloadIncomplete",
    2000: "OmahaRequestHTTPResponseBase",
})

# Ascending bit position; decode() relies on this order
FLAG_CODES = MappingProxyType({
    1 << 28: "TestOmahaUrlFlag",
    1 << 29: "TestImageFlag",
    1 << 30: "ResumedFlag",
    1 << 31: "DevModeFlag",
})

FLAG_SEPARATOR = ", "
FLAGS_PREFIX = " with "


def describe_primary(identifier: int) -> str:
    """Human-readable message for a primary error identifier."""
    message = ACTION_CODES.get(identifier)
    if message is not None:
        return message
    if HTTP_RESPONSE_BASE < identifier < HTTP_RESPONSE_END:
        return f"Http error code({identifier - HTTP_RESPONSE_BASE})"
    return f"Unknown Error {identifier}"


def decode(error_code: Optional[int]) -> Tuple[str, List[str]]:
    """Split a packed error code into its primary message and flag phrases.

    Args:
        error_code: Packed error code, or None when the client sent none

    Returns:
        (primary message, flag phrases in ascending bit order).
        ("", []) when error_code is None.

    Example:
        >>> decode((1 << 30) | 9)
        ('DownloadTransferError', ['ResumedFlag'])
    """
    if error_code is None:
        return "", []

    flags = [phrase for bit, phrase in FLAG_CODES.items() if error_code & bit]
    primary = describe_primary(error_code & PRIMARY_MASK)

    logger.debug(f"Decoded error code {error_code}: {primary}, flags={flags}")
    return primary, flags


def format_error(primary_message: str, flags: Sequence[str]) -> str:
    """Render a decoded error as a single line.

    Format is "<primary> with <flag>, <flag>"; golden outputs depend on it.
    """
    flags_text = FLAG_SEPARATOR.join(flags)
    if not flags_text:
        return primary_message
    if not primary_message:
        return flags_text
    return f"{primary_message}{FLAGS_PREFIX}{flags_text}"

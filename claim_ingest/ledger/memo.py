import base64
import json

from claim_ingest.ledger.exceptions import MemoDecodeError

ADDRESS_FIELDS = ("ipfsCid", "cid", "contentAddress")


def decode_memo_address(memo_base64: object) -> str:
    """Decode a base64 JSON memo and return its content-address.

    Raises:
        MemoDecodeError: if the memo is not a string, is empty, not base64,
            not a JSON object, or carries no recognizable address field.
    """
    if not isinstance(memo_base64, str):
        raise MemoDecodeError(f"memo must be a string, got {type(memo_base64).__name__}")
    if not memo_base64:
        raise MemoDecodeError("memo is empty")
    try:
        decoded = base64.b64decode(memo_base64, validate=True).decode("utf-8")
    except ValueError as exc:
        # binascii.Error, UnicodeDecodeError and non-ASCII input are all ValueErrors
        raise MemoDecodeError(f"memo is not base64 text: {exc}") from exc
    try:
        data = json.loads(decoded)
    except json.JSONDecodeError as exc:
        raise MemoDecodeError(f"memo is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MemoDecodeError("memo JSON must be an object")
    for field in ADDRESS_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    raise MemoDecodeError(f"memo has none of the fields {list(ADDRESS_FIELDS)}")


def encode_memo(address: str, field: str = "ipfsCid", **extra: object) -> str:
    """Inverse of decode_memo_address; used by the write-path and tests."""
    payload = json.dumps({field: address, **extra})
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")

import hashlib, json
import math
from datetime import date, datetime, timezone

def sha256_json(obj) -> str:
    return hashlib.sha256(json.dumps(obj, sort_keys=True, default=str).encode()).hexdigest()

def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def is_valid_number(val) -> bool:
    return isinstance(val, (int, float)) and not isinstance(val, bool) and math.isfinite(val)

def date_key(val) -> str:
    """Render a sheet date cell as an opaque, sortable string key."""
    if isinstance(val, datetime):
        return val.date().isoformat()
    if isinstance(val, date):
        return val.isoformat()
    if val is None:
        return ""
    return str(val).strip()

from __future__ import annotations
import os
from typing import Optional

import keyring
from keyring.errors import KeyringError


SERVICE = "lure_catalog"


def get_secret(name: str) -> Optional[str]:
    """Return secret from env or the OS credential store (via keyring).

    - First consult environment variable `name`.
    - If missing, returns `keyring.get_password(SERVICE, name)`.
    """
    v = os.environ.get(name)
    if v:
        return v
    try:
        return keyring.get_password(SERVICE, name)
    except KeyringError:
        return None


def require_secret(name: str) -> str:
    v = get_secret(name)
    if not v:
        raise RuntimeError(f"{name} is not set (env or keyring service '{SERVICE}')")
    return v

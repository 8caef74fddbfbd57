# src/utils/coerce.py
from __future__ import annotations

from typing import Any, Optional

import numpy as np

_FLAG_MAP = {
    "yes": True,
    "no": False,
    "y": True,
    "n": False,
    "true": True,
    "false": False,
    "on": True,
    "off": False,
    "1": True,
    "0": False,
    "흡연": True,
    "비흡연": False,
    True: True,
    False: False,
    1: True,
    0: False,
}


def to_flag(val: Any) -> Optional[bool]:
    """
    Map checkbox / Yes-No style values to a bool.
    Returns None when the value is missing or cannot be mapped.
    """
    if val is None or (isinstance(val, float) and np.isnan(val)):
        return None
    if isinstance(val, str):
        key = val.strip().lower()
        if key == "":
            return None
        return _FLAG_MAP.get(key)
    if isinstance(val, (bool, np.bool_)):
        return bool(val)
    return _FLAG_MAP.get(val)


def to_int(val: Any) -> Optional[int]:
    """
    Parse a whole number from a form value ("35", 35, 35.0).
    Returns None for blanks, fractions and anything non-numeric.
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, np.integer)):
        return int(val)
    if isinstance(val, float):
        if np.isnan(val) or not val.is_integer():
            return None
        return int(val)
    if isinstance(val, str):
        text = val.strip().replace(",", "")
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None
    return None

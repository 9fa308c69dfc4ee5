#!/usr/bin/env python3
"""
Common utilities for flowcanvas.
"""
import json
import random
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

ID_ALPHABET = string.ascii_lowercase + string.digits


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def random_id(length: int = 9) -> str:
    """Short random base36 identifier"""
    return "".join(random.choices(ID_ALPHABET, k=length))


def print_section(title: str, width: int = 60):
    """Print a formatted section header"""
    print("\n" + "=" * width)
    if title:
        print(title)
        print("=" * width)
    else:
        print("=" * width)


def save_json(data: Any, path: Path, indent: int = 2):
    """Save data as JSON file"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False, default=str)


def load_json(path: Path) -> Any:
    """Load JSON file"""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)

"""
Shared helpers used across API route modules.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any


def coerce_query_value(value: Any, cast: Any) -> Any:
    # Allow direct unit-test invocation without FastAPI Query parsing.
    raw = value.default if hasattr(value, "default") else value
    return cast(raw)

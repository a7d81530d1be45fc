"""
Fallback chain used by the heavier analysis capabilities.

A capability reports that it could not answer by returning ``None``; the chain
then moves on to the next one. The reconstruction-error anomaly detector and
the network forecaster both sit in front of a cheaper statistical stage this
way, so the caller always receives an answer from the first stage able to
produce one.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple, TypeVar

log = logging.getLogger(__name__)

_T = TypeVar("_T")

Stage = Tuple[str, Callable[[], Optional[_T]]]


def first_available(*stages: Stage) -> Tuple[Optional[str], Optional[_T]]:
    """Run ``(name, attempt)`` stages in order; return the first non-``None`` answer."""
    for position, (name, attempt) in enumerate(stages):
        result = attempt()
        if result is not None:
            if position:
                log.warning("fallback stage %r answered after %d failed stage(s)", name, position)
            else:
                log.debug("stage %r answered", name)
            return name, result
        log.debug("stage %r produced no result", name)
    return None, None

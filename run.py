#!/usr/bin/env python3

"""
Smoke test runner for the TrendLens API against a live server.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import argparse
import asyncio
import json
import os
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

BASE_URL = os.getenv("TRENDLENS_BASE_URL", "http://localhost:4323/api/v1")
HEADERS = {"Content-Type": "application/json"}
NOW_MS = int(time.time() * 1000)

REFERENCE = [
    22.5, 24.3, 23.8, 25.7, 22.1, 26.4, 24.9, 23.2, 95.8, 25.5,
    24.1, 22.8, 26.7, 23.5, 25.2, 24.8, 108.3, 23.9, 25.6, 22.4,
]
RISING = [float(v) for v in range(1, 31)]
TIMESTAMPS = [NOW_MS - (len(RISING) - i) * 60_000 for i in range(len(RISING))]


@dataclass(frozen=True)
class Case:
    label: str
    method: str
    path: str
    body: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    expect: int = 200
    section: str = ""


def series(values: List[Optional[float]], extra: Dict[str, Any] | None = None) -> Dict[str, Any]:
    d: Dict[str, Any] = {"values": values}
    if extra:
        d.update(extra)
    return d


CASES: list[Case] = [
    Case("health", "GET", "/health", section="Health"),

    # ── Full analysis ─────────────────────────────────────
    Case("zscore defaults", "POST", "/analyze", section="Analysis", body=series(REFERENCE)),
    Case("iqr", "POST", "/analyze", section="Analysis",
         body=series(REFERENCE, {"method": "iqr", "sensitivity": 2.0})),
    Case("ml", "POST", "/analyze", section="Analysis",
         body=series(REFERENCE, {"method": "ml", "sensitivity": 3.0})),
    Case("ai-analysis mode", "POST", "/analyze", section="Analysis",
         body=series(RISING, {"mode": "ai-analysis", "enable_insights": False})),
    Case("with timestamps", "POST", "/analyze", section="Analysis",
         body=series(RISING, {"timestamps": TIMESTAMPS, "steps": 5})),
    Case("with gaps", "POST", "/analyze", section="Analysis",
         body=series([1.0, None, 3.0, 4.0, None, 6.0])),
    Case("single sample", "POST", "/analyze", section="Analysis", body=series([42.0])),
    Case("empty", "POST", "/analyze", section="Analysis", body=series([])),

    # ── Single operations ─────────────────────────────────
    Case("anomalies zscore", "POST", "/anomalies", section="Operations",
         body=series(REFERENCE, {"sensitivity": 2.5})),
    Case("anomalies iqr", "POST", "/anomalies", section="Operations",
         body=series(REFERENCE, {"method": "iqr"})),
    Case("forecast", "POST", "/forecast", section="Operations", body=series(RISING, {"steps": 5})),
    Case("forecast short", "POST", "/forecast", section="Operations", body=series([1.0, 2.0, 3.0])),
    Case("insights", "POST", "/insights", section="Operations", body=series(REFERENCE)),
    Case("stats", "POST", "/stats", section="Operations", body=series(REFERENCE)),
    Case("stats resampled", "POST", "/stats", section="Operations",
         body=series(RISING, {"timestamps": TIMESTAMPS, "aggregate_window_ms": 180_000})),

    # ── Sessions ──────────────────────────────────────────
    Case("submit", "POST", "/sessions/smoke", section="Sessions", body=series(REFERENCE), expect=202),
    Case("resubmit", "POST", "/sessions/smoke", section="Sessions", body=series(RISING), expect=202),
    Case("settle", "GET", "/sessions/smoke", section="Sessions", params={"wait": "true"}),
    Case("drop", "DELETE", "/sessions/smoke", section="Sessions"),
    Case("dropped", "GET", "/sessions/smoke", section="Sessions", expect=404),

    # ── Validation ────────────────────────────────────────
    Case("unknown method", "POST", "/anomalies", section="Validation",
         body=series(REFERENCE, {"method": "fourier"}), expect=422),
    Case("zero sensitivity", "POST", "/analyze", section="Validation",
         body=series(REFERENCE, {"sensitivity": 0}), expect=422),
    Case("steps out of range", "POST", "/forecast", section="Validation",
         body=series(RISING, {"steps": 0}), expect=422),
    Case("timestamp length mismatch", "POST", "/analyze", section="Validation",
         body=series(REFERENCE, {"timestamps": TIMESTAMPS}), expect=400),
]


async def run_case(client: httpx.AsyncClient, case: Case) -> tuple[bool, str, Any]:
    try:
        if case.method == "GET":
            r = await client.get(case.path, params=case.params)
        elif case.method == "DELETE":
            r = await client.delete(case.path, params=case.params)
        else:
            r = await client.request(case.method, case.path, json=case.body, params=case.params)
    except httpx.TransportError as exc:
        return False, f"transport error: {exc}", None

    try:
        body: Any = r.json()
    except ValueError:
        body = r.text
    if r.status_code == case.expect:
        return True, "", body
    return False, f"{r.status_code} {r.reason_phrase}: {body}", body


async def main() -> None:
    parser = argparse.ArgumentParser(description="Run API smoke cases")
    parser.add_argument("--section", help="only run cases from this section name")
    parser.add_argument("--label", help="only run the case with this exact label")
    args = parser.parse_args()
    selected = [
        c for c in CASES
        if (not args.section or c.section == args.section) and (not args.label or c.label == args.label)
    ]
    if not selected:
        print("no matching cases (check --section or --label)")
        sys.exit(1)

    passed = failed = 0
    current_section = ""

    async with httpx.AsyncClient(base_url=BASE_URL, headers=HEADERS, timeout=60) as client:
        for case in selected:
            if case.section != current_section:
                current_section = case.section
                print(f"\n── {current_section} {'─' * max(0, 44 - len(current_section))}")

            ok, detail, body = await run_case(client, case)
            pretty = json.dumps(body, indent=2) if isinstance(body, (dict, list)) else str(body)
            if ok:
                passed += 1
                print(f"  ✓ PASS  {case.method} {case.path} — {case.label}")
                print(f"         response:\n{pretty}")
            else:
                failed += 1
                print(f"  ✗ FAIL  {case.method} {case.path} — {case.label} (expected {case.expect})")
                if detail:
                    print(f"         {detail}")

    total = passed + failed
    print(f"\n{'━' * 43}")
    print(f"  Results: {passed} passed / {failed} failed / {total} total")
    print(f"  {'All cases passed ✓' if failed == 0 else f'{failed} case(s) failed ✗'}")
    print(f"{'━' * 43}\n")
    sys.exit(0 if failed == 0 else 1)


if __name__ == "__main__":
    asyncio.run(main())

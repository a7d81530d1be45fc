"""
Test cases for the first-available fallback chain.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.fallback import first_available


def test_first_stage_answers():
    calls = []

    def second():
        calls.append("second")
        return 2

    assert first_available(("first", lambda: 1), ("second", second)) == ("first", 1)
    assert calls == []


def test_none_moves_to_next_stage():
    assert first_available(("first", lambda: None), ("second", lambda: [])) == ("second", [])


def test_no_stage_answers():
    assert first_available(("first", lambda: None)) == (None, None)
    assert first_available() == (None, None)

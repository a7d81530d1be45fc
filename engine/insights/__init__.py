"""
Insight generation: independent threshold rules over a series, its anomalies and its forecast, each producing at most one categorized natural-language statement.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.insights.rules import RULES, Insight, InsightContext, build_context, generate, rank

__all__ = ["RULES", "Insight", "InsightContext", "build_context", "generate", "rank"]

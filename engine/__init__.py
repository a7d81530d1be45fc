"""
Engine packages for the TrendLens analysis engine

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.enums import AnomalyMethod, ForecastSource, InsightType, VisualizationMode

__all__ = ["AnomalyMethod", "ForecastSource", "InsightType", "VisualizationMode"]

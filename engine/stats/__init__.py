"""
Descriptive statistics for a numeric sample: count, mean, median, min, max, population variance and standard deviation.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.stats.descriptive import DescriptiveStats, compute

__all__ = ["DescriptiveStats", "compute"]

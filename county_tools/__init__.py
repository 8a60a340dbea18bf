# The MIT License (MIT)
#
# Copyright (c) 2020 Covid Act Now
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
"""County level COVID-19 data extraction from state health departments
"""

__version__ = "0.1.0"
import inspect
from typing import List, Type

from county_tools import scrapers
from county_tools.scrapers.official.base import VariantDashboard


def all_subclasses(cls):
    return set(cls.__subclasses__()).union(
        [s for c in cls.__subclasses__() for s in all_subclasses(c)]
    )


def unblocked_scrapers(cls):
    # VariantDashboard implements fetch and normalize but is not a functional
    # scraper on its own, so we explicitly remove it.
    blocked = [VariantDashboard]
    return sorted(
        (
            x
            for x in all_subclasses(cls)
            if not inspect.isabstract(x) and x not in blocked
        ),
        key=lambda x: x.__name__,
    )


ALL_SCRAPERS: List[Type[scrapers.DatasetBase]] = unblocked_scrapers(
    scrapers.DatasetBase
)

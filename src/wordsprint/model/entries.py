# SPDX-License-Identifier: MIT

from wordsprint.model.ymd import Ymd

# Daily totals keyed by calendar day. Values are the net of every delta
# applied to that day, not the deltas themselves.
Entries = dict[Ymd, int]

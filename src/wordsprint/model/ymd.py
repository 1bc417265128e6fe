# SPDX-License-Identifier: MIT

# Calendar day in the UTC civil calendar, formatted YYYY-MM-DD
Ymd = str

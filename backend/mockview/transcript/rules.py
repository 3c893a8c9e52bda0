"""
Transcript text rules.
Changing these changes what gets committed.
"""

# Committed segments are joined with this
SEGMENT_SEPARATOR = " "

# Finals that strip down to nothing are not committed
SKIP_BLANK_FINALS = True

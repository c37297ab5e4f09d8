"""
Tournament progression engine for doubles cups: group draw, standings,
tiebreakers, knockout seeding and bracket progression.
"""

# ecampaign/operations/clock.py

from datetime import datetime, timezone

# Naive UTC timestamps everywhere: SQLite drops tzinfo and Postgres columns are
# declared without time zone, so comparisons must never mix aware and naive.


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)

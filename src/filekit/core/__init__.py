"""Scanning engine: walker, filter, ignore rules, patterns, line scanner."""

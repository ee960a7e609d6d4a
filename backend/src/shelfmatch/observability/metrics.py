"""Prometheus metrics for ShelfMatch.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Matching metrics
match_requests_total = Counter(
    "shelfmatch_match_requests_total",
    "Total matching calls by outcome",
    ["query_type", "outcome"]  # query_type: text|barcode, outcome: exact_alias|exact_barcode|fuzzy|none
)

match_confidence_total = Counter(
    "shelfmatch_match_confidence_total",
    "Matching calls by confidence tier",
    ["confidence"]
)

match_score_histogram = Histogram(
    "shelfmatch_match_score",
    "Winning fuzzy score distribution",
    buckets=[0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0]
)

match_duration_seconds = Histogram(
    "shelfmatch_match_duration_seconds",
    "Time spent in a single matching call",
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25]
)

# Learning loop metrics
aliases_learned_total = Counter(
    "shelfmatch_aliases_learned_total",
    "Aliases written from human confirmations",
    ["source"]  # source: barcode|photo|manual|receipt
)

barcode_check_digit_total = Counter(
    "shelfmatch_barcode_check_digit_total",
    "Scanned barcodes by check digit result",
    ["result"]  # result: valid|invalid|unknown
)

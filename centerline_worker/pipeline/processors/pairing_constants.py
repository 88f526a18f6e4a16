"""
Default thresholds for parallel pair detection and centerline synthesis.

All lengths are in meters, the unit the drawings are authored in. They are
converted to the host's internal length unit by Settings.pairing_thresholds()
before any stage runs.
"""

# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------
# Segments shorter than this are dropped before entering the pipeline.
MIN_LINE_LENGTH_M = 0.20

# ---------------------------------------------------------------------------
# Coincident points
# ---------------------------------------------------------------------------
# Endpoints are grouped by rounding to a precision derived from this value:
# precision = max(0, round(-log10(POINT_TOLERANCE_M)))
POINT_TOLERANCE_M = 0.01
# Rounding precision used when the tolerance is not positive.
FALLBACK_PRECISION = 6
# Outward push applied to every coincident endpoint.
SPLIT_EPSILON_M = 0.001

# ---------------------------------------------------------------------------
# Pair matching
# ---------------------------------------------------------------------------
# abs(dot(d1, d2)) must reach this; 0.999 is roughly 2.5 degrees.
PARALLEL_THRESHOLD = 0.999
# Perpendicular separation range (inclusive), i.e. plausible duct/tray widths.
MIN_DISTANCE_M = 0.08
MAX_DISTANCE_M = 2.5
# Minimum longitudinal overlap for a pair that is not end-to-end coincident.
MIN_OVERLAP_LENGTH_M = 0.01
# end(line1) to start(line2) closer than this marks the pair as coincident.
COINCIDENT_THRESHOLD_M = 0.02

# ---------------------------------------------------------------------------
# Overlap floor for touching segments
# ---------------------------------------------------------------------------
# Overlaps below OVERLAP_FLOOR_M whose near endpoints touch are reported as
# COINCIDENT_OVERLAP_M instead of their true (near-zero) value.
OVERLAP_FLOOR_M = 0.01
COINCIDENT_OVERLAP_M = 0.001

# ---------------------------------------------------------------------------
# Numeric guards (unitless / squared internal units)
# ---------------------------------------------------------------------------
# Projection basis with squared length below this is treated as a point.
PROJECTION_EPS = 1e-9
# Overlap parameter range at or below this falls back to the full line.
CENTERLINE_RANGE_EPS = 1e-6

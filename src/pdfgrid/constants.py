"""Named constants for grid axes and metadata versioning.

These replace magic numbers and axis names scattered throughout the package.
"""

# ---------------------------------------------------------------------------
# Axis names
# ---------------------------------------------------------------------------
NUCLEONS = "nucleons"   # Nucleon number A
ALPHAS = "alphas"       # Strong coupling alpha_s
XI = "xi"
DELTA = "delta"
KT = "kt"               # Transverse momentum
X = "x"                 # Momentum fraction
Q2 = "q2"               # Energy scale squared

# Optional axes in canonical order; also the order of bits in the active mask
# and the order of coordinates in a query point.
OPTIONAL_AXES = (NUCLEONS, ALPHAS, XI, DELTA, KT)
ALL_AXES = OPTIONAL_AXES + (X, Q2)

# Storage order of the two grid layouts ("flavor" marks the PID axis)
FLAVOR = "flavor"
FIXED_RANK_ORDER = (NUCLEONS, ALPHAS, FLAVOR, KT, X, Q2)
VARIABLE_RANK_ORDER = (NUCLEONS, ALPHAS, XI, DELTA, KT, FLAVOR, X, Q2)

# Layout of the flat fixed-rank payload as delivered by the loader
FIXED_RANK_PAYLOAD_ORDER = (NUCLEONS, ALPHAS, KT, X, Q2, FLAVOR)

# ---------------------------------------------------------------------------
# Metadata versioning
# ---------------------------------------------------------------------------
V2_DETECTION_TOLERANCE = 1.0e-10
VERSION_MARKER_KEY = "MetaDataVersion"
SUPPORTED_VERSIONS = (1, 2)

# Ranges meaning "dimension not present" after a V1 -> V2 upgrade
NEUTRAL_XI_RANGE = (1.0, 1.0)
NEUTRAL_DELTA_RANGE = (0.0, 0.0)

# Pinned coordinate used for xi / delta on fixed-rank subgrids
PINNED_LEGACY_VALUE = 0.0

# ---------------------------------------------------------------------------
# Storage defaults
# ---------------------------------------------------------------------------
DATA_PATH_ENV = "PDFGRID_DATA_PATH"
VALIDATE_SCHEMA_ENV = "PDFGRID_VALIDATE_SCHEMA"
CONTAINER_SUFFIX = ".npz"
CONTAINER_FORMAT_VERSION = 1

"""Tuned constants for the texture analysis algorithms.

All normalization bounds below are empirical: they were calibrated on
avatar texture sets (albedo, emission, masks) and describe the range in
which each raw statistic is informative. Below the low bound the statistic
reads as "flat", above the high bound as "saturated".
"""

# ── Preprocessing ──

# Pixels with alpha below this are treated as transparent.
ALPHA_THRESHOLD = 0.1

# Grayscale marker for transparent pixels. Luminance is always >= 0.
TRANSPARENT_MARKER = -1.0

# Rec. 709 luma weights.
LUMA_R = 0.2126
LUMA_G = 0.7152
LUMA_B = 0.0722

# Analysis resolution cap: 512×512 pixels.
MAX_SAMPLED_PIXELS = 262144
MIN_SAMPLED_DIMENSION = 64

# "Significant alpha": more than 1% of pixels visibly below full opacity.
SIGNIFICANT_ALPHA_CUTOFF = 0.99
SIGNIFICANT_ALPHA_FRACTION = 0.01

# ── Image math ──

DCT_BLOCK_SIZE = 8
# Coefficients with u + v above this count as high frequency.
DCT_HIGH_FREQ_INDEX_SUM = 2
# At most ~16 sampled DCT blocks per axis.
DCT_MAX_BLOCKS_PER_AXIS = 16
DCT_MIN_TOTAL_ENERGY = 1e-4

GLCM_LEVELS = 16
HISTOGRAM_BINS = 256

# Stride sampling: gradient statistics look at ~256 columns, edges at ~128.
GRADIENT_SAMPLE_COLUMNS = 256
EDGE_SAMPLE_COLUMNS = 128

DETAIL_BLOCK_SIZE = 16
DETAIL_MIN_VARIANCE = 0.005
DETAIL_VARIANCE_FACTOR = 0.5

# ── Analysis thresholds ──

DEFAULT_COMPLEXITY_SCORE = 0.5
MIN_ANALYSIS_DIMENSION = 8
MIN_OPAQUE_PIXELS_FOR_ANALYSIS = 64
# Below this many opaque pixels a texture is too sparse to analyse.
MIN_OPAQUE_PIXELS_FOR_STANDARD_ANALYSIS = 100
SPARSE_TEXTURE_SCORE = DEFAULT_COMPLEXITY_SCORE * 0.2
MIN_NORMAL_MAP_DIMENSION = 4
ZERO_WEIGHT_THRESHOLD = 1e-4
# Emission maps are read at 90% of their measured complexity.
EMISSION_COMPLEXITY_FACTOR = 0.9

# ── Fast strategy ──

FAST_GRADIENT_WEIGHT = 0.4
FAST_SPATIAL_FREQUENCY_WEIGHT = 0.35
FAST_COLOR_VARIANCE_WEIGHT = 0.25

GRADIENT_RANGE = (0.05, 0.8)
SPATIAL_FREQ_RANGE = (0.01, 0.15)
COLOR_VARIANCE_RANGE = (0.005, 0.08)

# ── High accuracy strategy ──

HIGH_ACCURACY_DCT_WEIGHT = 0.35
HIGH_ACCURACY_CONTRAST_WEIGHT = 0.25
HIGH_ACCURACY_HOMOGENEITY_WEIGHT = 0.20
HIGH_ACCURACY_ENERGY_WEIGHT = 0.10
HIGH_ACCURACY_ENTROPY_WEIGHT = 0.10

ENTROPY_RANGE = (2.0, 7.0)
CONTRAST_RANGE = (5.0, 80.0)

# ── Perceptual strategy ──

PERCEPTUAL_VARIANCE_WEIGHT = 0.4
PERCEPTUAL_EDGE_WEIGHT = 0.3
PERCEPTUAL_DETAIL_WEIGHT = 0.3
PERCEPTUAL_BLOCK_SIZE = 4

VARIANCE_RANGE = (0.001, 0.05)
EDGE_RANGE = (0.02, 0.3)

# ── Normal map ──

NORMAL_MAP_VARIATION_MULTIPLIER = 2.0
NORMAL_MAP_SAMPLE_STEP = 2
# Decoded vectors shorter than this are treated as the flat +Z normal.
NORMAL_MIN_LENGTH = 1e-5

# ── Combined strategy defaults ──

COMBINED_DEFAULT_FAST_WEIGHT = 0.3
COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT = 0.5
COMBINED_DEFAULT_PERCEPTUAL_WEIGHT = 0.2

# ── Sizing ──

# Block-compressed formats need 4-aligned dimensions.
DIMENSION_ALIGNMENT = 4
DEFAULT_HIGH_QUALITY_THRESHOLD = 0.7

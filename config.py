"""Central configuration for tag image preprocessing.

All tunable parameters are defined here with descriptive names.
These values can be adjusted to match the downstream tagger's expectations.
"""

# =============================================================================
# TAG GEOMETRY
# =============================================================================

# Size of a single tag patch as consumed by the downstream classifier.
# Shared by the border margin and the contrast-normalization tiling.
TAG_WIDTH = 64
TAG_HEIGHT = 64
TAG_SIZE = (TAG_WIDTH, TAG_HEIGHT)

# =============================================================================
# CONTRAST NORMALIZATION (CLAHE)
# =============================================================================

# Caps per-tile amplification so near-uniform background tiles stay flat
CLAHE_CLIP_LIMIT = 2.0

# =============================================================================
# ADAPTIVE THRESHOLD
# =============================================================================

# Neighborhood size (pixels, odd) for the Gaussian-weighted local threshold
THRESHOLD_BLOCK_SIZE = 51

# Constant subtracted from the weighted local mean
THRESHOLD_OFFSET = 0

# Value assigned to foreground pixels in the binary mask
THRESHOLD_MAX_VALUE = 255

# Blend weights used when the binary mask is mixed back into the image
BLEND_WEIGHT_ORIGINAL = 0.7
BLEND_WEIGHT_THRESHOLD = 0.3

# =============================================================================
# STAGE DEFAULTS
# =============================================================================

APPLY_BORDER = True
APPLY_CONTRAST_NORM = False
APPLY_THRESHOLD = False
BINARY_OUTPUT = False

# =============================================================================
# OUTPUT
# =============================================================================

# Appended to the input stem to name each output image
OUTPUT_SUFFIX = "_wb"

# Manifest file written inside the output directory unless overridden
MANIFEST_FILENAME = "images.txt"

"""
Drawing generator constants.

Scale, origin, canvas margins, and styling constants for apron drawings.
All geometry is computed in cm and converted to SVG user units (px) through
``SCALE``, so the whole drawing scales uniformly.
"""

# =============================================================================
# SCALE AND LAYOUT CONSTANTS
# =============================================================================

SCALE = 4.0  # px per cm

# Top-left corner of the body's bounding box (cm). The body moves further down
# when the neck strap and the top width dimension would reach into the header.
ORIGIN_X_CM = 30.0
ORIGIN_Y_CM = 70.0

# Canvas = widest body edge + horizontal margin, total height + vertical margin
CANVAS_MARGIN_X_CM = 60.0
CANVAS_MARGIN_Y_CM = 110.0

# Shoulder curve control point offset, as a share of (bottom - top) width
SHOULDER_CURVE_RATIO = 0.1
# Shoulder curve control point height, as a share of the upper section height
SHOULDER_CURVE_HEIGHT_RATIO = 0.8


# =============================================================================
# SVG STYLING
# =============================================================================

BACKGROUND_COLOR = "#ffffff"
OUTLINE_COLOR = "#333333"
OUTLINE_WIDTH = 2
ANNOTATION_COLOR = "#666666"
TEXT_COLOR = "#333333"
MUTED_TEXT_COLOR = "#666666"
PATTERN_BASE_COLOR = "#f5f5f5"
FONT_FAMILY = "Arial, sans-serif"

STRAP_WIDTH = 6
THREADED_STRAP_OPACITY = 0.45
THREADED_STRAP_DASH = "6,4"

POCKET_FILL_OPACITY = 0.7
POCKET_STROKE_WIDTH = 1
POCKET_STITCH_DASH = "3,3"
POCKET_DIVIDER_WIDTH = 0.75


# =============================================================================
# STRAP GEOMETRY (cm)
# =============================================================================

STRAP_ARC_HEIGHT_CM = 20.0      # reference height of the neck strap
CLASSIC_STUB_RATIO = 0.6        # classic stubs rise 60% of the arc height
HALTER_RING_RADIUS_CM = 1.5
CROSS_TIP_OFFSET_RATIO = 0.3    # cross tips land 30% of top width past centre
CROSS_TIP_DROP_RATIO = 0.25     # and 25% of the arc height above the body
EYELET_RADIUS_CM = 1.0
EYELET_INSET_CM = 3.0
CROSS_WAIST_DROP_RATIO = 0.5    # outward waist segment falls 1 cm per 2 cm
SLIDER_WIDTH_CM = 6.0
SLIDER_HEIGHT_CM = 2.5
TIE_SPREAD_CM = 5.0
TIE_CAP_RADIUS_CM = 0.8
TIE_FLOURISH_CM = 2.5

# Waist straps are drawn shortened so they stay on the canvas; the true
# length is written next to each strap end.
WAIST_STRAP_PREVIEW_RATIO = 0.25
WAIST_STRAP_MAX_PREVIEW_CM = 25.0


# =============================================================================
# ANNOTATIONS
# =============================================================================

DIMENSION_LINE_WIDTH = 1
ARROW_SIZE = 6                  # px, dimension arrowheads
SMALL_ARROW_SIZE = 4            # px, logo annotation arrowheads
DIMENSION_FONT_SIZE = 11
DIMENSION_TEXT_OFFSET = 8       # px between a dimension line and its label

TOP_WIDTH_GAP = 6               # px between the neck strap label and the top width dimension
BOTTOM_WIDTH_OFFSET_CM = 10.0   # below the hem
TOTAL_HEIGHT_OFFSET_CM = 15.0   # left of the body
UPPER_HEIGHT_OFFSET_CM = 10.0   # right of the body
LOWER_HEIGHT_OFFSET_CM = 25.0   # right of the body, outside the upper dimension

LOGO_ANNOTATION_GAP_CM = 2.0
LOGO_FONT_SIZE = 9
STRAP_LABEL_FONT_SIZE = 9
STRAP_LABEL_GAP = 8             # px between a strap and its length label

TITLE_TEXT = "APRON DESIGN DRAWING"
TITLE_FONT_SIZE = 18
SUBTITLE_FONT_SIZE = 12
LEGEND_FONT_SIZE = 12
LEGEND_WIDTH = 200              # px reserved at the top right for the legend

TITLE_Y = 30                    # px, title baseline
SUBTITLE_Y = 50                 # px, parameter summary baseline
HEADER_HEIGHT = 64              # px kept clear of the drawing below the title and summary
LEGEND_Y = 70                   # px, first legend line
LEGEND_LINE_SPACING = 20
LEGEND_SWATCH_SIZE = (30, 20)

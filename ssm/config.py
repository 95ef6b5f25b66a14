"""
Centralized configuration for the Squat Simulator Model.
Edit values here to change inputs without touching the computation code.
"""
from typing import Dict, Tuple
import os

# Default posture (the session baseline). Angles are measured from vertical.
DEFAULT_THIGH_ANGLE_DEG: float = 90.0      # Thigh horizontal in a deep squat
DEFAULT_SHIN_ANGLE_DEG: float = 45.0       # Shin forward lean at the ankle
DEFAULT_TORSO_LENGTH_M: float = 0.50       # Hip to shoulder
DEFAULT_FEMUR_LENGTH_M: float = 0.48       # Hip to knee
DEFAULT_SHIN_LENGTH_M: float = 0.41        # Knee to ankle
DEFAULT_FEET_LENGTH_M: float = 0.24        # Heel to toe; balance point sits at half of it

# Display
# The pose is computed with y upward and the ankle at the origin. Displays with a
# top-left origin use y_display = DISPLAY_Y_OFFSET_M - y.
DISPLAY_Y_OFFSET_M: float = 1.5
DISPLAY_VIEWBOX: Tuple[float, float, float, float] = (-1.05, -0.2, 2.0, 2.0)  # (x, y, width, height)
COM_GUIDE_HEIGHT_M: float = 2.0            # Height of the vertical balance guide line

###############################################
# Femur drag inverse solver
#
# With a new femur length F the shin S and torso T are fixed by
#   S + F + T = H      and      T = TS * S
# and the back angle x (deg) is the root of
#   f(x) = S*sin(R*x) + T*sin(x) - F*sin(phi) - feet/2
# searched by bisection on [BISECTION_LOW_DEG, BISECTION_HIGH_DEG].
###############################################
BISECTION_LOW_DEG: float = 0.0
BISECTION_HIGH_DEG: float = 90.0
BISECTION_ITERATIONS: int = 30
BISECTION_TOLERANCE: float = 1e-6

# Animation
ANIMATION_CYCLE_DURATION_S: float = 2.0    # One squat-and-return
ANIMATION_CYCLES: int = 3
STANDING_THIGH_ANGLE_DEG: float = 0.0
STANDING_SHIN_ANGLE_DEG: float = 0.0
ANIMATION_SAMPLE_COUNT: int = 121          # Time grid for tables/plots

# Slider ranges exposed by the UI: key -> (min, max, step)
SLIDER_RANGES: Dict[str, Tuple[float, float, float]] = {
    "femur_length": (0.25, 0.65, 0.001),
    "thigh_angle": (0.0, 180.0, 0.1),
    "shin_angle": (-5.0, 90.0, 0.1),
    "torso_length": (0.30, 0.75, 0.001),
    "shin_length": (0.23, 0.63, 0.001),
    "feet_length": (0.11, 0.39, 0.001),
}

# Plot/export options
EXPORT_CSV: bool = False                   # Save sweep/animation tables to CSV files

# Figure saving
# When True, figures will be written to disk (PNG by default) in PLOTS_DIR.
# Files will be overwritten on subsequent runs using the same names.
SAVE_PLOTS: bool = False
PLOTS_DIR: str = os.path.join("plots")    # Relative to current working directory
SAVE_FORMAT: str = "png"                 # e.g., "png", "pdf", "svg"
SAVE_DPI: int = 300                        # Image DPI for raster formats

# When False, plots won't block during generation; a final block can be enabled separately.
SHOW_BLOCKING: bool = False
# If True, block once at the very end so all plot windows stay open. Set to False for non-blocking CI/VS Code runs.
BLOCK_AT_END: bool = False

# Colors used for the stick figure (shin, femur, torso, foot)
SEGMENT_COLORS: Dict[str, str] = {
    "shin": "blue",
    "femur": "red",
    "torso": "green",
    "foot": "brown",
}

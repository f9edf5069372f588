from __future__ import annotations

"""Game configuration constants for Drift Bird.

Physics quantities are per reference frame (TARGET_FPS); the simulation step
scales them by the number of reference frames covered by each tick.
"""

# Game configuration
WINDOW_WIDTH = 400
WINDOW_HEIGHT = 600
GROUND_HEIGHT = 50
GROUND_Y = WINDOW_HEIGHT - GROUND_HEIGHT
TARGET_FPS = 60

# Bird
BIRD_WIDTH = 34
BIRD_HEIGHT = 24
BIRD_X = 80
BIRD_INITIAL_Y = 250

# Physics (px/frame, px/frame^2)
GRAVITY = 0.5
FLAP_FORCE = -8.0
HEAVY_GRAVITY_FACTOR = 1.2
FLOATY_GRAVITY_FACTOR = 0.7
MILD_LOW_GRAVITY_FACTOR = 0.9
MILD_HIGH_GRAVITY_FACTOR = 1.1
MILD_GRAVITY_PERIOD = 4.0  # s, alternation in the two phases after drift starts
GRAVITY_CYCLE_PERIOD = 5.0  # s, base/heavy/floaty round-robin
MAX_VELOCITY = 12.0
MIN_VELOCITY = -12.0

# Control flip kinematics
FLIP_HOLD_FACTOR = 2.5
FLIP_RELEASE_FACTOR = 1.2
FLIP_SOFTEN_BLEND = 0.5

# Horizontal drift
HORIZONTAL_FRICTION = 0.95
MAX_HORIZONTAL_VELOCITY = 3.0

# Pipes
PIPE_WIDTH = 52
GAP_SIZE = 150
MIN_GAP_SIZE = 100
GAP_SHRINK_PER_PHASE = 8
PIPE_SPAWN_INTERVAL = 1600  # ms
PIPE_SPEED = 2.5
MIN_GAP_Y = 100  # margin between gap edge and ceiling/ground

# Phases
PHASE_DURATION = 15.0  # s
PHASE_DISPLAY_CAP = 10
GRAVITY_DRIFT_PHASE = 2
OSCILLATION_PHASE = 3
WIND_PHASE = 4
CONTROL_FLIP_PHASE = 5
GHOST_PIPE_PHASE = 6
SPEED_DRIFT_PHASE = 7
VISUAL_GLITCH_PHASE = 8
COLLAPSE_PHASE = 9
DELAYED_COLLISION_PHASE = VISUAL_GLITCH_PHASE
OVERLOAD_PHASE_INTERVAL = 3

# Wind
WIND_FORCE = 0.15
GUST_INTERVAL = 2000  # ms
WIND_BASE_INTENSITY = 0.5
WIND_INTENSITY_STEP = 0.125

# Speed drift
SPEED_DRIFT_MAX = 0.15
SPEED_DRIFT_PERIOD = 10.0  # s

# Effects
GHOST_PIPE_BASE_PROBABILITY = 0.1
GHOST_PIPE_PHASE_STEP = 0.1
GHOST_PIPE_MAX_PROBABILITY = 0.6
DELAYED_COLLISION_PROBABILITY = 0.25
DELAYED_COLLISION_MS = 300
OSCILLATION_AMPLITUDE = 40.0  # px
OSCILLATION_FREQUENCY = 1.2  # rad/s
OSCILLATION_FREQUENCY_STEP = 0.1
OSCILLATION_FREQUENCY_MAX_STEPS = 4
GLITCH_ROTATION = 2.0  # degrees
GLITCH_ROTATION_RATE = 2.0  # rad/s
GLITCH_HUE_RATE = 10.0  # degrees/s
GLITCH_SHAKE = 4.0  # px, front end only
GLITCH_SHAKE_DECAY = 0.9

# Control inversion
CONTROL_FLIP_WARNING_MS = 2000
CONTROL_FLIP_DURATION_MS = 8000
CONTROL_FLIP_TRIGGER_WINDOW = 1.0  # s into the trigger phase
CONTROL_FLIP_RANDOM_CHANCE = 0.0005  # per tick

# Slow motion (real time)
SLOW_MOTION_TIME_SCALE = 0.4
SLOW_MOTION_DURATION_MS = 800
PHASE_BANNER_MS = 2000

# System overload (real time)
OVERLOAD_FREEZE_MS = 1500
OVERLOAD_RECOVERY_MS = 600
OVERLOAD_FLICKER_MS = 80

# Adaptive assist
ASSIST_DEATHS_THRESHOLD = 3
ASSIST_GAP_BOOST = 1.15
ASSIST_GRAVITY_REDUCTION = 0.9
ASSIST_SPEED_REDUCTION = 0.9
ASSIST_MAX_GAP_MULTIPLIER = 1.45
ASSIST_MIN_GRAVITY_MULTIPLIER = 0.7
ASSIST_MIN_SPEED_MULTIPLIER = 0.7

# Palette (front end only)
COL_BACKGROUND = (13, 17, 23)
COL_GROUND = (26, 35, 50)
COL_GROUND_LINE = (0, 255, 136)
COL_BIRD = (0, 255, 136)
COL_PIPE = (0, 204, 255)
COL_WARNING = (255, 60, 60)
COL_TEXT = (230, 230, 230)

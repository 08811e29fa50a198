"""
Constants used throughout the tracking pipeline
"""

# Performance and monitoring
STATUS_REPORT_INTERVAL = 100  # Report status every N frames
FPS_WINDOW_SIZE = 100  # Number of frames to average for processing rate
SUMMARY_EVENT_INTERVAL = 50  # Print summary every N events

# Tracking defaults
DEFAULT_IOU_THRESHOLD = 0.5
DEFAULT_MAX_AGE_FRAMES = 5
DEFAULT_ASSUMED_FPS = 30.0
DEFAULT_MIN_CONFIDENCE = 0.5

# Lane heuristic defaults
DEFAULT_BRIGHTNESS_THRESHOLD = 200.0
DEFAULT_SCAN_LINE_PCT = 75.0  # Scan-line row as percentage of frame height
LEFT_REGION_PCT = 30.0
RIGHT_REGION_PCT = 70.0

# Classes considered by the risk analyzer
VEHICLE_CLASSES = ("car", "truck", "bus", "motorcycle", "bicycle")

# Classes that block a lane for the ideal-position recommendation
LANE_VEHICLE_CLASSES = ("car", "truck", "bus", "motorcycle")

# Risk heuristic defaults
DEFAULT_MIN_DISTANCE = 5.0
DEFAULT_MAX_DISTANCE = 50.0
RISK_SIZE_FACTOR = 2.5
APPROACHING_RISK_MULTIPLIER = 1.5
HIGH_RISK_THRESHOLD = 0.7
MEDIUM_RISK_THRESHOLD = 0.4

# Traffic flow
DENSITY_SATURATION_COUNT = 10  # Vehicles in frame for density 1.0
FREE_FLOW_SPEED = 80.0  # km/h at zero density
MIN_FLOW_SPEED = 10.0
HIGH_CONGESTION_DENSITY = 0.7
MEDIUM_CONGESTION_DENSITY = 0.3

# Alerts
DEFAULT_ALERT_COOLDOWN = 2.0  # Seconds between alerts for the same track

# Environment variables
ENV_DETECTIONS_PATH = "ADAS_DETECTIONS"
ENV_JITTER_SEED = "ADAS_JITTER_SEED"

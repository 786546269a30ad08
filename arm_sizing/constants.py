"""Physical constants and fixed sizing parameters for the 6-DoF arm."""

GRAVITY = 9.80665  # m/s²
PI = 3.141592653589793

# P[W] = T[N·m] · n[rpm] · POWER_SCALE / POWER_CONVERSION
POWER_CONVERSION = 9550.0
POWER_SCALE = 1000.0

JOINT_COUNT = 6

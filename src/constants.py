"""Contains global constants and default values used throughout the project."""

EXAMPLE_SAMPLES_FOLDER: str = "./assets/samples"

# === MODEL CONSTANTS ===

PATTERN_SIZE_DEFAULT: int = 3
PATTERN_SIZE_MIN_LIMIT: int = 1
PATTERN_SIZE_MAX_LIMIT: int = 6

PERIODIC_INPUT_DEFAULT: bool = True

OUTPUT_SIZE_DEFAULT: int = 20
OUTPUT_SIZE_MIN_LIMIT: int = 1
OUTPUT_SIZE_MAX_LIMIT: int = 200

RANDOM_SEED_DEFAULT: int = 12345
RANDOM_SEED_MAX: int = 999999999

# Upper bound of the random perturbation added to cell entropies to break ties.
ENTROPY_NOISE_MAX: float = 1e-6

# Tile ID counted by the difficulty labeler (water).
HAZARD_TILE_DEFAULT: int = 2
DIFFICULTY_EASY_MAX_HAZARDS: int = 2
DIFFICULTY_MEDIUM_MAX_HAZARDS: int = 6

# === VIEW CONSTANTS ===

TILE_SIZE_DEFAULT: int = 16
TILE_SIZE_MIN_LIMIT: int = 4
TILE_SIZE_MAX_LIMIT: int = 256

# Colors used to render tile IDs when no tileset image is loaded.
TILE_PALETTE_DEFAULT: dict[int, tuple[int, int, int]] = {
    0: (222, 199, 140),  # sand
    1: (92, 158, 72),  # grass
    2: (52, 104, 186),  # water
}
# Color used for tile IDs missing from both the tileset and the palette.
TILE_COLOR_UNKNOWN: tuple[int, int, int] = (255, 0, 255)

LAYOUT_LEFT_SIDE_MAX_WIDTH: int = 350
LAYOUT_LEFT_SIDE_VBOX_SPACING: int = 20
LAYOUT_GRID_MIDDLE_COLUMN_MIN_WIDTH: int = 20
LAYOUT_GRID_RIGHT_COLUMN_MIN_WIDTH: int = 150

# === LOGGING CONSTANTS ===

LOG_FILE_NAME: str = "cavern_generator.log"
LOG_MAX_SIZE: int = 5 * 1024 * 1024
LOG_BACKUP_COUNT: int = 3

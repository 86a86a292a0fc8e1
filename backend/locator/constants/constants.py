# index archive
INDEX_EXTENSION = ".npz"
NODE_SEPARATOR = "#"
SENTINEL = "$"
OCC_CHECKPOINT_STEP = 128

# seeding
DEFAULT_STRATEGY = "overlapping"

# timer names, one per pipeline phase
SEQUENCES_TIMER = "sequences"
PATTERNS_TIMER = "patterns"
FIND_TIMER = "find"
LOCATE_TIMER = "locate"

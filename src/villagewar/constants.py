WARRIOR = "warrior"
ARCHER = "archer"
UNIT_TYPES = (WARRIOR, ARCHER)

# Squads are trained in fixed-size blocks; a full squad holds this many soldiers.
DEFAULT_SQUAD_SIZE = 10

# Stat coefficients are expressed per 100 soldiers.
PER_UNITS = 100.0

# Effective attack/defence never drops below this when forming a ratio.
MIN_EFFECTIVE_STAT = 0.1

# Melee has no designed tick cap; this only guarantees termination.
MELEE_SAFETY_GUARD = 5000

# Hard caps on a siege: outer rounds and inner battle steps.
MAX_SIEGE_ROUNDS = 30
MAX_INNER_STEPS = 50

# Flat multiplier on the winner's pursuit power during the pursuit phase.
PURSUIT_BASE = 0.25

# No squad absorbs more than this share of a battle's losses while others can.
SOFT_CAP_SHARE = 0.33

# Squad health bands (fraction of max size still standing).
SQUAD_YELLOW_RATIO = 0.7
SQUAD_ORANGE_RATIO = 0.4

# A unit group's role is named after a type once it fields this share of squads.
GROUP_ROLE_SHARE_PCT = 60

# Fortress building effects, per building level.
PALISADE_HP_PER_LEVEL = 400
WATCH_POST_SLOTS_PER_LEVEL = 5
GARRISON_HUT_CAPACITY_PER_LEVEL = 5
FORTRESS_MAX_BUILDING_LEVEL = 5

# Oldest entries are dropped once the battle log holds this many events.
LOG_BUFFER_SIZE = 5000

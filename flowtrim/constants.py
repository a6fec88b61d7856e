"""Fixed heuristics shared by the optimizer stages."""

# Percentage credited to an issue-driven optimization, by issue severity.
SEVERITY_SAVINGS_PERCENTAGE = {"low": 10, "medium": 25, "high": 50}
DEFAULT_SEVERITY_SAVINGS_PERCENTAGE = 15

# Pattern-driven opportunities.
DECOMPOSITION_MIN_STEPS = 10
DECOMPOSITION_MIN_TOTAL_COST = 100
DECOMPOSITION_SAVINGS_RATE = 0.15
DECOMPOSITION_STEPS_PER_SPEC = 5
SIMILAR_GROUP_MIN_SIZE = 3
SIMILAR_GROUP_SAVINGS_RATE = 0.4
REPEATED_GROUP_MIN_SIZE = 2
REPEATED_GROUP_SAVINGS_RATE = 0.6
VIBES_PER_CONVERTED_SPEC = 3

# Remaining cost fraction after applying each optimization to a step.
BATCHED_COST_FACTOR = 0.6
CACHED_COST_FACTOR = 0.4
SPEC_CONVERSION_COST_FACTOR = 0.3

# Caller parameter adjustments.
MAX_ADJUSTED_PERCENTAGE = 85
TIGHT_CONSTRAINT_MULTIPLIER = 1.2
HIGH_VOLUME_THRESHOLD = 1000
HIGH_VOLUME_MULTIPLIER = 1.3
HIGH_PERFORMANCE_MULTIPLIER = 1.1

# Batching and caching estimates.
BATCH_BASE_EFFICIENCY = 0.2
BATCH_EFFICIENCY_PER_STEP = 0.1
BATCH_MAX_EFFICIENCY = 0.7
CACHE_BASE_HIT_RATE = 0.3
CACHE_FREQUENCY_BONUS = 0.1
CACHE_MAX_FREQUENCY_BONUS = 0.5
CACHE_RETRIEVAL_BONUS = 0.2
CACHE_SIMPLE_INPUT_BONUS = 0.1
CACHE_SIMPLE_INPUT_LIMIT = 2
CACHE_MAX_HIT_RATE = 0.9
CACHE_TTL_CONFIG_SECONDS = 3600
CACHE_TTL_DATA_SECONDS = 1800
CACHE_TTL_VIBE_SECONDS = 900
CACHE_TTL_ANALYSIS_SECONDS = 1800

# Decomposition.
MIN_DECOMPOSABLE_STEPS = 4

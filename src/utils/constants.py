"""
Constants for the prospect persona pipeline.

This module contains all magic numbers, string identifiers, and configuration
values used throughout the application. Keyword dictionaries live in
keyword_tables.py; everything else that needs tuning lives here.
"""

from typing import Dict, FrozenSet, Tuple


# =============================================================================
# NETWORK IDENTIFIERS
# =============================================================================

NETWORK_LINKEDIN = "linkedin"
NETWORK_TWITTER = "twitter"
NETWORK_INSTAGRAM = "instagram"
NETWORK_GITHUB = "github"
NETWORK_YOUTUBE = "youtube"

SUPPORTED_NETWORKS: Tuple[str, ...] = (
    NETWORK_LINKEDIN,
    NETWORK_TWITTER,
    NETWORK_INSTAGRAM,
    NETWORK_GITHUB,
    NETWORK_YOUTUBE,
)

# Identity claims here are the hardest to forge (verified company linkage)
HIGH_TRUST_NETWORKS: FrozenSet[str] = frozenset({NETWORK_LINKEDIN})

PROFILE_URL_TEMPLATES: Dict[str, str] = {
    NETWORK_LINKEDIN: "https://linkedin.com/in/{handle}",
    NETWORK_TWITTER: "https://twitter.com/{handle}",
    NETWORK_INSTAGRAM: "https://instagram.com/{handle}",
    NETWORK_GITHUB: "https://github.com/{handle}",
    NETWORK_YOUTUBE: "https://youtube.com/@{handle}",
}

# Networks probed by name heuristics, with the max number of handle variants
HEURISTIC_NETWORKS: Dict[str, int] = {
    NETWORK_TWITTER: 3,
    NETWORK_INSTAGRAM: 1,
    NETWORK_GITHUB: 1,
}


# =============================================================================
# IDENTITY RESOLUTION
# =============================================================================

ORIGIN_PROVIDED = "provided"    # URL supplied by the caller
ORIGIN_HEURISTIC = "heuristic"  # Handle guessed from the name

STATUS_PENDING = "pending"
STATUS_PROBABLE = "probable"
STATUS_CONFIRMED = "confirmed"

VALID_STATUSES: Tuple[str, ...] = (STATUS_PENDING, STATUS_PROBABLE, STATUS_CONFIRMED)

# Evidence counts assigned at generation time
PROVIDED_EVIDENCE_COUNT = 2  # URL + company
HEURISTIC_EVIDENCE_COUNT = 1  # name only

# Confidence scoring
CONFIDENCE_BASE = 0.3
CONFIDENCE_BONUS_PROVIDED = 0.5
CONFIDENCE_BONUS_EVIDENCE = 0.2
CONFIDENCE_BONUS_HIGH_TRUST = 0.15
CONFIDENCE_CAP = 1.0

# Status thresholds
CONFIRMED_THRESHOLD = 0.85
PROBABLE_THRESHOLD = 0.60
MIN_EVIDENCE_FOR_CONFIRMED = 2


# =============================================================================
# NETWORK SCANNING
# =============================================================================

DEFAULT_WINDOW_MONTHS = 12
DEFAULT_MAX_POSTS = 50

# Sliding-window rate limit per network
DEFAULT_RATE_LIMIT = 10           # requests
RATE_LIMIT_PERIOD_SECONDS = 1.0   # per second

# Per-profile scan deadline; stragglers become empty results
DEFAULT_SCAN_TIMEOUT_SECONDS = 20.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 15.0

# Upstream API endpoints
GITHUB_API_URL = "https://api.github.com"
TWITTER_API_URL = "https://api.twitter.com/2"
YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"
INSTAGRAM_GRAPH_URL = "https://graph.facebook.com/v19.0"

SCANNER_USER_AGENT = "prospect-persona-intel/0.1"

# Timestamp formats seen in upstream payloads (tried after ISO 8601)
TIMESTAMP_FORMATS = [
    "%Y-%m-%dT%H:%M:%S%z",       # 2024-09-15T13:00:00+0000 (Graph API)
    "%Y-%m-%d %H:%M:%S",        # 2024-09-15 13:00:00
    "%Y-%m-%d",                  # 2024-09-15
    "%a %b %d %H:%M:%S %z %Y",   # Sun Sep 15 13:00:00 +0000 2024
    "%d/%m/%Y %H:%M",            # 15/09/2024 13:00
    "%d/%m/%Y",                  # 15/09/2024
]


# =============================================================================
# CLASSIFICATION LABELS
# =============================================================================

TOPIC_GENERAL = "General"

INTENT_BUYING_SIGNAL = "buying_signal"
INTENT_COMPLAINT = "complaint"
INTENT_QUESTION = "question"
INTENT_ANNOUNCEMENT = "announcement"
INTENT_OTHER = "other"

SENTIMENT_POSITIVE = "positive"
SENTIMENT_NEGATIVE = "negative"
SENTIMENT_NEUTRAL = "neutral"

STYLE_FORMAL = "formal"
STYLE_TECHNICAL = "technical"
STYLE_HUMOR = "humor"
STYLE_DIRECT = "direct"

# Classification confidence
CLASSIFICATION_BASE_CONFIDENCE = 0.5
SUBSTANTIAL_TEXT_LENGTH = 50
SUBSTANTIAL_TEXT_BONUS = 0.2
DETAILED_TEXT_LENGTH = 150
DETAILED_TEXT_BONUS = 0.1
KEYWORD_HIT_BONUS = 0.05
MAX_KEYWORD_BONUS = 0.2

# Direct style: short text with at most one sentence break
DIRECT_STYLE_MAX_LENGTH = 100
DIRECT_STYLE_MAX_SEGMENTS = 2


# =============================================================================
# PERSONA EXTRACTION
# =============================================================================

TONE_OPTIMISTIC = "optimistic"
TONE_CRITICAL = "critical"
TONE_NEUTRAL = "neutral"
TONE_BALANCED = "balanced"

# Positive must exceed negative by this factor (and vice versa)
TONE_DOMINANCE_RATIO = 1.5

MAX_PERSONA_TOPICS = 5
MAX_PERSONA_KEYWORDS = 5
MAX_ACTIVITY_WINDOWS = 3
MAX_CHANNELS = 3

WEEKDAY_NAMES: Tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


# =============================================================================
# PLAYBOOK GENERATION
# =============================================================================

DEFAULT_VENDOR = "TOTVS"

TOPIC_ERP = "ERP"
TOPIC_SUPPLY_CHAIN = "Supply Chain"
TOPIC_CLOUD = "Cloud"

# Opening line, first matching topic wins
OPENING_RULES: Tuple[Tuple[str, str], ...] = (
    (TOPIC_ERP, "I saw that you're interested in ERP and digital transformation."),
    (TOPIC_SUPPLY_CHAIN, "I noticed your focus on supply chain optimization."),
)
OPENING_DEFAULT = "we spotted a few optimization opportunities in your operation."

# Value proposition, first rule with any pain point present wins
VALUE_PROPOSITION_RULES: Tuple[Tuple[FrozenSet[str], str], ...] = (
    (
        frozenset({"manual", "repetitive", "repetitivo"}),
        "We cut manual processes by up to 70% with intelligent automation.",
    ),
    (
        frozenset({"integration", "integração", "legacy", "legado"}),
        "We integrate legacy systems in days, not months.",
    ),
)
VALUE_PROPOSITION_DEFAULT = "We raise productivity by 40% with proven solutions."

# Call to action keyed on persona tone
CALL_TO_ACTION_RULES: Dict[str, str] = {
    TONE_OPTIMISTIC: "Worth 15 minutes for me to walk you through a few success stories?",
    TONE_CRITICAL: "Can I send you a free diagnostic of your operation?",
}
CALL_TO_ACTION_DEFAULT = "How about a tailored demo, no strings attached?"

# Service packages
BASE_SERVICE_PACKAGE = "360° Diagnostic + Implementation Roadmap"
INTEGRATION_PAIN_POINTS: FrozenSet[str] = frozenset({"integration", "integração"})
INTEGRATION_SERVICE_PACKAGE = "Express Integration Consulting"
CLOUD_SERVICE_PACKAGE = "Assisted Cloud Migration"

# Vendor product taxonomy: topic -> product, plus fallbacks
VENDOR_CATALOG: Dict[str, Dict[str, object]] = {
    "TOTVS": {
        "products": {
            "ERP": "TOTVS Protheus (Backoffice)",
            "Manufacturing": "TOTVS MES (Manufacturing)",
            "Supply Chain": "TOTVS WMS (Warehouse)",
            "HR": "TOTVS RH (Human Resources)",
        },
        "default_product": "TOTVS Backoffice (Integrated Management)",
        "case_library": "https://olv.com.br/cases",
    },
    "OLV": {
        "products": {
            "ERP": "OLV ERP Selection & Rollout",
            "BI/Analytics": "OLV Data & Analytics Accelerator",
            "Automation": "OLV Process Automation Studio",
            "Tax": "OLV Tax Compliance Review",
        },
        "default_product": "OLV Business Process Consulting",
        "case_library": "https://olv.com.br/cases",
    },
}
DEFAULT_CASE_LIBRARY = "https://olv.com.br/cases"

# Sector anchors inside a vendor case library
CASE_SECTOR_SLUGS: Dict[str, str] = {
    "ERP": "erp",
    "Supply Chain": "supply-chain",
    "Manufacturing": "manufacturing",
    "Cloud": "cloud",
    "Tax": "tax",
}

"""
keyword_tables.py — Lookup data consulted by the query synthesizer, the
quality ranker, the palette extractor and the content enrichers.

All tables are plain data, loaded once at import. Order matters wherever a
table is a dict or a list of rules: the first match wins (queries) or the
first match is kept first (tags).
"""

from __future__ import annotations

from typing import Dict, List, Tuple

# ── Query synthesis ───────────────────────────────────────────────────────────

# Destination keyword → base search phrase. Multi-word places before the
# countries that contain them so "amalfi" beats "italy".
LOCATION_QUERIES: Dict[str, str] = {
    "costa rica":     "costa rica rainforest",
    "new zealand":    "new zealand landscape",
    "south africa":   "south africa safari",
    "sri lanka":      "sri lanka tea hills",
    "bora bora":      "bora bora overwater bungalow",
    "cinque terre":   "cinque terre italy",
    "amalfi":         "amalfi coast italy",
    "tuscany":        "tuscany italy countryside",
    "santorini":      "santorini greece",
    "mykonos":        "mykonos greece",
    "provence":       "provence france lavender",
    "paris":          "paris france",
    "rome":           "rome italy",
    "venice":         "venice italy canals",
    "florence":       "florence italy",
    "barcelona":      "barcelona spain",
    "mallorca":       "mallorca spain coast",
    "lisbon":         "lisbon portugal",
    "kyoto":          "kyoto japan temples",
    "tokyo":          "tokyo japan city",
    "bali":           "bali indonesia",
    "hawaii":         "hawaii beach",
    "maldives":       "maldives beach resort",
    "zermatt":        "zermatt matterhorn",
    "patagonia":      "patagonia mountains",
    "mexico":         "mexico beach resort",
    "italy":          "italy travel",
    "france":         "france travel",
    "spain":          "spain travel",
    "portugal":       "portugal travel",
    "greece":         "greece islands",
    "croatia":        "croatia coast",
    "switzerland":    "switzerland alps",
    "austria":        "austria alps",
    "norway":         "norway fjords",
    "iceland":        "iceland landscape",
    "scotland":       "scotland highlands",
    "ireland":        "ireland countryside",
    "japan":          "japan travel",
    "thailand":       "thailand beach",
    "vietnam":        "vietnam travel",
    "morocco":        "morocco medina",
    "egypt":          "egypt pyramids",
    "peru":           "peru machu picchu",
    "chile":          "chile travel",
    "argentina":      "argentina travel",
    "brazil":         "brazil travel",
    "canada":         "canada rockies",
    "australia":      "australia travel",
    "india":          "india travel",
    "turkey":         "turkey travel",
}

# Activity keyword → base search phrase.
ACTIVITY_QUERIES: Dict[str, str] = {
    "skiing":       "skiing slopes",
    "ski":          "skiing slopes",
    "snowboarding": "snowboarding slopes",
    "hiking":       "hiking mountain trail",
    "trekking":     "trekking mountain trail",
    "climbing":     "rock climbing adventure",
    "camping":      "camping outdoor nature",
    "beach":        "beach vacation",
    "surfing":      "surfing beach waves",
    "diving":       "scuba diving underwater",
    "snorkeling":   "snorkeling tropical reef",
    "sailing":      "sailing boat ocean",
    "kayaking":     "kayaking lake",
    "cycling":      "cycling tour countryside",
    "biking":       "cycling tour countryside",
    "road trip":    "road trip scenic drive",
    "safari":       "safari wildlife",
    "wine":         "wine tasting vineyard",
    "food":         "food market culinary travel",
    "dining":       "outdoor dining restaurant",
    "spa":          "spa wellness retreat",
    "yoga":         "yoga retreat",
    "festival":     "festival celebration",
    "museum":       "museum culture travel",
    "city":         "city break streets",
    "mountain":     "mountain landscape",
    "lake":         "lake landscape",
    "island":       "island beach",
    "desert":       "desert dunes",
    "forest":       "forest nature",
}

# Season and social keywords match whole words only, so inflections are listed.
SEASON_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "winter": ("winter", "snow", "snowy", "christmas", "december", "january", "february",
               "ski", "skis", "skiing"),
    "summer": ("summer", "june", "july", "august", "sunshine", "heatwave"),
    "spring": ("spring", "blossom", "blossoms", "march", "april", "easter"),
    "autumn": ("autumn", "fall", "foliage", "september", "october", "november"),
}

SEASON_PHRASES: Dict[str, str] = {
    "winter": "winter snow",
    "summer": "summer sunshine",
    "spring": "spring blossoms",
    "autumn": "autumn colors",
}

SOCIAL_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "family":   ("family", "families", "kids", "children", "parents"),
    "friends":  ("friends", "group", "crew", "bachelor", "bachelorette"),
    "romantic": ("romantic", "honeymoon", "couple", "couples", "anniversary", "partner"),
    "solo":     ("solo", "alone", "myself"),
}

SOCIAL_PHRASES: Dict[str, str] = {
    "family":   "family enjoying",
    "friends":  "friends enjoying",
    "romantic": "couple enjoying",
    "solo":     "traveler exploring",
}
DEFAULT_SOCIAL_PHRASE = "people enjoying"

STOPWORDS = frozenset({
    "the", "and", "for", "with", "from", "this", "that", "they", "them",
    "their", "there", "where", "when", "what", "which", "who", "why", "how",
    "want", "would", "like", "our", "some",
})

FALLBACK_QUERY_SUFFIX = "travel destination"
GENERIC_QUERY = "travel vacation destination"

PREMIUM_ADJECTIVES: Tuple[str, ...] = (
    "stunning",
    "award winning",
    "cinematic",
    "breathtaking",
    "professional",
    "editorial",
)

# ── Placeholder images ────────────────────────────────────────────────────────

# (trigger keywords, topic words). First bucket with a trigger wins.
PLACEHOLDER_TOPICS: List[Tuple[Tuple[str, ...], Tuple[str, ...]]] = [
    (("beach", "mexico", "ocean", "island"), ("beach", "ocean", "tropical", "resort")),
    (("mountain", "hiking", "alps", "ski"),  ("mountain", "hiking", "nature", "landscape")),
    (("city", "urban"),                      ("city", "urban", "architecture", "skyline")),
    (("europe", "italy", "france", "spain"), ("europe", "architecture", "culture", "landmark")),
]
PLACEHOLDER_GENERIC: Tuple[str, ...] = ("travel", "vacation", "destination", "journey")
PLACEHOLDER_URL = "https://picsum.photos/1024/1024?random={stamp}-{topic}-{n}"

# ── Quality ranker ────────────────────────────────────────────────────────────

# Groups are disjoint so each one contributes its weight independently.
HUMAN_PRESENCE_WORDS: Tuple[str, ...] = (
    "people", "person", "family", "friends", "couple", "man", "woman",
    "women", "men", "kids", "children", "travelers", "tourists", "group",
)
EMOTIONAL_WORDS: Tuple[str, ...] = (
    "enjoying", "laughing", "happy", "smiling", "joy", "celebrating", "fun",
)
ACTIVITY_WORDS: Tuple[str, ...] = (
    "skiing", "hiking", "dining", "exploring", "swimming", "surfing",
    "cycling", "walking", "sailing", "climbing",
)
LIFESTYLE_WORDS: Tuple[str, ...] = (
    "cozy", "romantic", "warm", "intimate", "relaxing", "peaceful",
)

# Resolution preference when returning a selected candidate
URL_PREFERENCE: Tuple[str, ...] = ("full", "raw", "regular", "small")

# ── Palette ───────────────────────────────────────────────────────────────────

SYNTHETIC_COLORS: Tuple[str, ...] = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
    "#F8C471", "#82E0AA", "#F1948A", "#D7BDE2",
)

DEFAULT_PALETTE: Tuple[str, ...] = (
    "#8B4513",  # saddle brown
    "#DAA520",  # goldenrod
    "#F5DEB3",  # wheat
    "#2F4F4F",  # dark slate gray
    "#CD853F",  # peru
)

# ── Content enrichers ─────────────────────────────────────────────────────────

SUMMARY_TEMPLATES: Tuple[str, ...] = (
    "A carefully curated travel experience that captures the essence of your "
    "vision. This journey combines authentic local experiences with modern "
    "comfort, offering a perfect balance of adventure and relaxation.",
    "An unforgettable adventure that brings your travel dreams to life. "
    "Discover hidden gems, immerse yourself in local culture, and create "
    "memories that will last a lifetime.",
    "A thoughtfully designed travel experience that showcases the best of your "
    "chosen destination. From breathtaking landscapes to cultural treasures, "
    "every moment promises to be extraordinary.",
)

# (rule group, tag, trigger keywords), scanned in order.
TAG_RULES: List[Tuple[str, str, Tuple[str, ...]]] = [
    ("season",      "winter",      ("winter", "snow", "christmas", "ski")),
    ("season",      "summer",      ("summer", "sunshine", "july", "august")),
    ("season",      "spring",      ("spring", "blossom", "easter")),
    ("season",      "autumn",      ("autumn", "foliage", "october")),
    ("destination", "europe",      ("europe", "italy", "france", "spain", "greece",
                                    "portugal", "switzerland", "austria", "croatia")),
    ("destination", "asia",        ("asia", "japan", "thailand", "vietnam", "bali", "india")),
    ("destination", "tropical",    ("tropical", "caribbean", "hawaii", "maldives", "mexico")),
    ("terrain",     "beach",       ("beach", "ocean", "coast", "seaside", "island")),
    ("terrain",     "mountains",   ("mountain", "alps", "peak", "hiking", "trek", "trekking")),
    ("terrain",     "desert",      ("desert", "dunes", "sahara")),
    ("terrain",     "lakes",       ("lake", "fjord")),
    ("activity",    "skiing",      ("ski", "snowboard")),
    ("activity",    "food",        ("food", "restaurant", "cuisine", "dining", "culinary")),
    ("activity",    "wine",        ("wine", "vineyard")),
    ("activity",    "culture",     ("culture", "museum", "history", "art", "temple")),
    ("activity",    "relaxation",  ("relax", "relaxation", "spa", "wellness", "yoga")),
    ("activity",    "photography", ("photography", "photo")),
    ("setting",     "city",        ("city", "urban", "downtown")),
    ("setting",     "countryside", ("countryside", "village", "rural")),
    ("setting",     "luxury",      ("luxury", "resort", "five star")),
    ("setting",     "budget",      ("budget", "backpack", "hostel", "cheap")),
    ("setting",     "family",      ("family", "kids", "children")),
    ("setting",     "romantic",    ("romantic", "honeymoon", "couple")),
]

FALLBACK_TAGS: Tuple[str, ...] = ("nature", "adventure", "exploration")
MIN_TAGS = 3
MAX_TAGS = 5

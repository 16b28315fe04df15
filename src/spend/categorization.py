"""Keyword-based transaction categorization.

Descriptions are lowercased and checked against an ordered list of rules.
The first rule whose predicate matches supplies the label; descriptions that
match nothing fall back to ``Other``.

Order matters: "gas" is listed under both Travel (fuel) and Service
(utilities), and because Travel is checked first every description containing
"gas" is categorized as Travel.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "Other"


@dataclass(frozen=True)
class CategoryRule:
    """A label paired with the predicate that selects it."""

    label: str
    predicate: Callable[[str], bool]

    def matches(self, text: str) -> bool:
        """Return True if this rule applies to an already-lowercased text."""
        return self.predicate(text)


def keyword_rule(label: str, keywords: Iterable[str]) -> CategoryRule:
    """Build a rule that matches when any keyword occurs in the text.

    Args:
        label: Category label returned when the rule matches
        keywords: Substrings to look for; matched case-insensitively

    Returns:
        CategoryRule: Rule backed by a single compiled alternation
    """
    words = [k.lower() for k in keywords if k]
    if not words:
        raise ValueError(f"Category '{label}' needs at least one keyword")
    pattern = re.compile("|".join(re.escape(w) for w in words))
    return CategoryRule(label=label, predicate=lambda text: bool(pattern.search(text)))


FOOD_AND_DRINK_KEYWORDS = (
    "starbucks",
    "mcdonald",
    "chipotle",
    "dunkin",
    "subway",
    "chick-fil-a",
    "taco bell",
    "wendy's",
    "burger",
    "pizza",
    "domino's",
    "panera",
    "doordash",
    "uber eats",
    "grubhub",
    "postmates",
    "restaurant",
    "coffee",
    "cafe",
    "bakery",
    "sushi",
    "diner",
)

SHOPS_KEYWORDS = (
    "amazon",
    "walmart",
    "target",
    "costco",
    "whole foods",
    "trader joe",
    "kroger",
    "safeway",
    "publix",
    "best buy",
    "home depot",
    "ikea",
    "ebay",
    "etsy",
    "grocery",
    "market",
    "store",
    "shop",
)

TRAVEL_KEYWORDS = (
    "uber",
    "lyft",
    "shell",
    "chevron",
    "exxon",
    "sunoco",
    "gas",
    "fuel",
    "parking",
    "transit",
    "amtrak",
    "airline",
    "taxi",
)

RECREATION_KEYWORDS = (
    "netflix",
    "spotify",
    "hulu",
    "disney+",
    "hbo",
    "youtube",
    "steam",
    "playstation",
    "xbox",
    "nintendo",
    "cinema",
    "movie",
    "theater",
    "ticketmaster",
)

SERVICE_KEYWORDS = (
    "comcast",
    "xfinity",
    "verizon",
    "at&t",
    "t-mobile",
    "spectrum",
    "electric",
    "utility",
    "water",
    "gas",
    "internet",
    "phone",
    "insurance",
)

TRANSFER_KEYWORDS = (
    "venmo",
    "zelle",
    "paypal",
    "cash app",
    "transfer",
)

PAYMENT_KEYWORDS = (
    "payment",
    "thank you",
    "autopay",
)

DEFAULT_RULES: tuple[CategoryRule, ...] = (
    keyword_rule("Food and Drink", FOOD_AND_DRINK_KEYWORDS),
    keyword_rule("Shops", SHOPS_KEYWORDS),
    keyword_rule("Travel", TRAVEL_KEYWORDS),
    keyword_rule("Recreation", RECREATION_KEYWORDS),
    keyword_rule("Service", SERVICE_KEYWORDS),
    keyword_rule("Transfer", TRANSFER_KEYWORDS),
    keyword_rule("Payment", PAYMENT_KEYWORDS),
)


def categorize(
    description: str | None, rules: Sequence[CategoryRule] = DEFAULT_RULES
) -> list[str]:
    """Categorize a transaction description.

    Args:
        description: Merchant name or free-text description
        rules: Ordered rules; the first match wins

    Returns:
        list[str]: A single-element list with the matched label, or ``["Other"]``
    """
    text = (description or "").lower()
    for rule in rules:
        if rule.matches(text):
            return [rule.label]
    return [FALLBACK_CATEGORY]


class CategoryRuleConfig(BaseModel):
    """One entry of a categories file."""

    label: str = Field(..., min_length=1, description="Category label")
    keywords: list[str] = Field(..., min_length=1, description="Keywords to match")

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, v: list[str]) -> list[str]:
        """Drop blank keywords."""
        cleaned = [k.strip() for k in v if k and k.strip()]
        if not cleaned:
            raise ValueError("keywords must contain at least one non-blank entry")
        return cleaned


def load_rules(path: Path) -> tuple[CategoryRule, ...]:
    """Load an ordered rule set from a YAML file.

    The file is a list of mappings, evaluated top to bottom::

        - label: Food and Drink
          keywords: [starbucks, coffee]
        - label: Travel
          keywords: [uber, gas]

    Args:
        path: Path to the YAML file

    Returns:
        tuple[CategoryRule, ...]: Rules in file order

    Raises:
        ValueError: If the file is missing, malformed, or empty
    """
    if not path.exists():
        raise ValueError(f"Categories file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f)

    if not isinstance(raw_data, list) or not raw_data:
        raise ValueError(f"Categories file must contain a non-empty list: {path}")

    try:
        entries = [CategoryRuleConfig.model_validate(item) for item in raw_data]
    except ValidationError as e:
        raise ValueError(f"Invalid categories file {path}: {e}") from e

    rules = tuple(keyword_rule(entry.label, entry.keywords) for entry in entries)
    logger.info(f"Loaded {len(rules)} category rules from {path}")
    return rules

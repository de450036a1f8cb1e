"""
Canonical category groups

Free-text transaction categories ("Swiggy dinner", "Uber ride", "house rent")
are folded into a small closed set of groups for budgeting and charts.
One ordered rule table is shared by every view; bump RULES_VERSION whenever
keywords change so cached client data can be invalidated.
"""
from typing import List, Tuple

RULES_VERSION = 1

GROUP_OTHER = "Other"

# Order matters: the first matching rule wins, so earlier groups shadow later
# ones on overlapping keywords ("gas bill" -> Travel via "gas").
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Food", (
        "food", "restaurant", "dining", "groceries", "grocery",
        "coffee", "snacks", "swiggy", "zomato",
    )),
    ("Travel", (
        "gas", "fuel", "petrol", "diesel", "uber", "ola", "lyft", "taxi",
        "train", "bus", "flight", "tickets", "parking", "toll",
    )),
    ("Rent", ("rent", "lease", "house rent")),
    ("Utilities", ("electric", "electricity", "water", "wifi", "internet", "phone", "gas bill")),
    ("Shopping", ("shopping", "amazon", "flipkart", "clothes", "electronics", "mall")),
    ("Entertainment", ("movie", "netflix", "spotify", "games", "party", "outing")),
    ("Health", ("doctor", "medicine", "hospital", "pharmacy", "gym")),
    ("Education", ("course", "udemy", "books", "college", "fees")),
    ("Savings", ("savings", "investment", "sip", "stocks")),
)

CANONICAL_GROUPS: Tuple[str, ...] = tuple(group for group, _ in CATEGORY_RULES) + (GROUP_OTHER,)

_GROUP_BY_NAME = {group.lower(): group for group in CANONICAL_GROUPS}


def _clean(text) -> str:
    return str(text or "").strip().lower()


def _rule_matches(text: str, keywords: Tuple[str, ...]) -> bool:
    return any(text == kw or kw in text for kw in keywords)


def normalize(raw_text) -> str:
    """
    Map a raw category / note to its canonical group.

    Matching is by substring, so "seafood" is Food as well. Empty or
    unmatched input falls back to Other.

    Example:
        >>> normalize("SWIGGY dinner")
        'Food'
        >>> normalize("")
        'Other'
    """
    text = _clean(raw_text)
    if not text:
        return GROUP_OTHER

    for group, keywords in CATEGORY_RULES:
        if _rule_matches(text, keywords):
            return group
    return GROUP_OTHER


def budget_group(category) -> str:
    """
    Group a budget counts towards.

    Budgets are usually created from the group picker, so a category that is
    already a group name ("Health") stays as is; anything else is normalized.
    """
    return _GROUP_BY_NAME.get(_clean(category)) or normalize(category)


def suggest_categories(note, limit: int = 5) -> List[str]:
    """All groups whose keywords occur in the note, in rule order."""
    text = _clean(note)
    if not text:
        return []

    matches: List[str] = []
    for group, keywords in CATEGORY_RULES:
        if group not in matches and _rule_matches(text, keywords):
            matches.append(group)
    return matches[:limit]

"""
Keyword categorizer - suggests expense categories from a free-text description
"""

import re
from typing import Dict, List

from finance_insights.domain.models import UNCATEGORIZED, CategorySuggestion

CONFIDENCE_PER_MATCH = 25
MAX_CONFIDENCE = 95

CATEGORY_RULES: Dict[str, Dict] = {
    'Food': {
        'keywords': ['restaurant', 'cafe', 'lunch', 'dinner', 'breakfast', 'meal', 'food'],
        'icon': 'restaurant',
    },
    'Transport': {
        'keywords': ['uber', 'taxi', 'bus', 'train', 'gas', 'fuel', 'parking'],
        'icon': 'directions-car',
    },
    'Shopping': {
        'keywords': ['amazon', 'store', 'mall', 'shop', 'buy', 'purchase'],
        'icon': 'shopping-cart',
    },
    'Utilities': {
        'keywords': ['electricity', 'water', 'internet', 'phone', 'bill', 'utility'],
        'icon': 'lightbulb',
    },
    'Entertainment': {
        'keywords': ['movie', 'game', 'netflix', 'spotify', 'fun', 'entertainment'],
        'icon': 'movie',
    },
    'Health': {
        'keywords': ['doctor', 'medicine', 'hospital', 'clinic', 'medical', 'health'],
        'icon': 'local-hospital',
    },
    'Education': {
        'keywords': ['school', 'course', 'book', 'class', 'tuition', 'education'],
        'icon': 'school',
    },
    'Rent': {
        'keywords': ['rent', 'house', 'apartment', 'housing', 'mortgage'],
        'icon': 'home',
    },
    'Groceries': {
        'keywords': ['grocery', 'supermarket', 'market'],
        'icon': 'local-grocery-store',
    },
}


class TransactionCategorizer:
    """Matches descriptions against a category -> keyword rule table"""

    def __init__(self, rules: Dict[str, Dict] | None = None):
        self.rules = rules if rules is not None else CATEGORY_RULES

    def suggest(self, description: str | None) -> List[CategorySuggestion]:
        """
        Rank every category whose keywords appear in the description.

        A keyword matches when it is contained in any word of the
        description. Confidence is 25% per matched keyword, capped at 95%.
        Ties keep rule-table order.
        """
        if not description:
            return []

        words = re.findall(r"[\w&'-]+", description.lower())
        if not words:
            return []

        suggestions = []
        for category, rule in self.rules.items():
            matched = [kw for kw in rule['keywords'] if any(kw in word for word in words)]
            if not matched:
                continue
            suggestions.append(
                CategorySuggestion(
                    category=category,
                    confidence_percent=min(len(matched) * CONFIDENCE_PER_MATCH, MAX_CONFIDENCE),
                    icon=rule.get('icon', 'category'),
                    matched_keywords=matched,
                )
            )

        # sorted() is stable, so equal confidence keeps table order
        return sorted(suggestions, key=lambda s: -s.confidence_percent)

    def categorize(self, description: str | None) -> str:
        """Best matching category, or "Uncategorized" when nothing matches"""
        suggestions = self.suggest(description)
        if not suggestions:
            return UNCATEGORIZED
        return suggestions[0].category


_default_categorizer = TransactionCategorizer()


def suggest_categories(description: str | None) -> List[CategorySuggestion]:
    return _default_categorizer.suggest(description)


def categorize(description: str | None) -> str:
    return _default_categorizer.categorize(description)

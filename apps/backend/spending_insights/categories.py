"""
Category vocabulary

The global list of spending categories and the keyword table used to guess a
merchant's business category from its name.
"""

from __future__ import annotations

OTHERS = "Others"

ALL_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Healthcare",
    "Education",
    "Travel",
    "Utilities",
    "Insurance",
    "Investment",
    "Gifts",
    "Personal Care",
    "Home & Garden",
    "Technology",
    "Sports & Fitness",
    "Books & Media",
    "Pets",
    "Legal",
    "Taxes",
    OTHERS,
)

MERCHANT_CATEGORIES: dict[str, str] = {
    "restaurant": "Food & Dining",
    "cafe": "Food & Dining",
    "coffee": "Food & Dining",
    "pizza": "Food & Dining",
    "burger": "Food & Dining",
    "sushi": "Food & Dining",
    "chinese": "Food & Dining",
    "italian": "Food & Dining",
    "mexican": "Food & Dining",
    "indian": "Food & Dining",
    "thai": "Food & Dining",
    "japanese": "Food & Dining",
    "korean": "Food & Dining",
    "vietnamese": "Food & Dining",
    "mediterranean": "Food & Dining",
    "greek": "Food & Dining",
    "french": "Food & Dining",
    "spanish": "Food & Dining",
    "american": "Food & Dining",
    "fast food": "Food & Dining",
    "takeout": "Food & Dining",
    "delivery": "Food & Dining",
    "grocery": "Food & Dining",
    "supermarket": "Food & Dining",
    "convenience": "Food & Dining",
    "gas": "Transportation",
    "fuel": "Transportation",
    "uber": "Transportation",
    "lyft": "Transportation",
    "taxi": "Transportation",
    "parking": "Transportation",
    "public transport": "Transportation",
    "bus": "Transportation",
    "train": "Transportation",
    "subway": "Transportation",
    "metro": "Transportation",
    "airline": "Travel",
    "hotel": "Travel",
    "airbnb": "Travel",
    "booking": "Travel",
    "amazon": "Shopping",
    "walmart": "Shopping",
    "target": "Shopping",
    "costco": "Shopping",
    "best buy": "Shopping",
    "apple": "Technology",
    "google": "Technology",
    "microsoft": "Technology",
    "netflix": "Entertainment",
    "spotify": "Entertainment",
    "hulu": "Entertainment",
    "disney": "Entertainment",
    "youtube": "Entertainment",
    "movie": "Entertainment",
    "theater": "Entertainment",
    "concert": "Entertainment",
    "gym": "Sports & Fitness",
    "fitness": "Sports & Fitness",
    "workout": "Sports & Fitness",
    "pharmacy": "Healthcare",
    "doctor": "Healthcare",
    "hospital": "Healthcare",
    "clinic": "Healthcare",
    "dental": "Healthcare",
    "vision": "Healthcare",
    "insurance": "Insurance",
    "bank": "Investment",
    "credit union": "Investment",
    "atm": "Investment",
    "utility": "Utilities",
    "electric": "Utilities",
    "water": "Utilities",
    "gas company": "Utilities",
    "internet": "Utilities",
    "phone": "Utilities",
    "mobile": "Utilities",
    "education": "Education",
    "school": "Education",
    "university": "Education",
    "college": "Education",
    "bookstore": "Books & Media",
    "library": "Books & Media",
    "pet": "Pets",
    "veterinary": "Pets",
    "vet": "Pets",
    "gift": "Gifts",
    "salon": "Personal Care",
    "spa": "Personal Care",
    "beauty": "Personal Care",
    "hair": "Personal Care",
    "nail": "Personal Care",
    "home depot": "Home & Garden",
    "lowes": "Home & Garden",
    "hardware": "Home & Garden",
    "garden": "Home & Garden",
    "legal": "Legal",
    "lawyer": "Legal",
    "attorney": "Legal",
    "tax": "Taxes",
    "irs": "Taxes",
}


def get_all_categories() -> list[str]:
    return list(ALL_CATEGORIES)


def find_merchant_category(name: str | None) -> str:
    """Guess the business category for a merchant or free-text category.

    An exact keyword hit wins; otherwise the first keyword that contains, or
    is contained in, the lowercased name. Unknown names map to ``Others``.
    """
    if not name:
        return OTHERS
    lowered = name.strip().lower()
    if not lowered:
        return OTHERS
    if lowered in MERCHANT_CATEGORIES:
        return MERCHANT_CATEGORIES[lowered]
    for keyword, category in MERCHANT_CATEGORIES.items():
        if keyword in lowered or lowered in keyword:
            return category
    return OTHERS

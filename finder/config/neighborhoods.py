"""City to neighborhood catalog used by filter selection."""

CITIES_AND_NEIGHBORHOODS: dict[str, tuple[str, ...]] = {
    "תל אביב": (
        "כרם התימנים",
        "נווה צדק",
        "פלורנטיין",
        "הצפון הישן",
        "הצפון החדש",
        "בבלי",
        "מונטיפיורי",
        "לב תל אביב",
        "נמל תל אביב",
        "התקווה",
        "רמת אביב",
        "נווה אביבים",
    ),
    "רמת גן": (
        "הבורסה",
        "מרום נווה",
        "רמת חן",
        "תל בנימין",
        "הגפן",
    ),
    "גבעתיים": (
        "בורוכוב",
        "ארלוזורוב",
        "שינקין גבעתיים",
        "גבעת רמב\"ם",
    ),
}


def city_of(neighborhood: str) -> str | None:
    """Return the city a neighborhood belongs to, if known."""

    for city, names in CITIES_AND_NEIGHBORHOODS.items():
        if neighborhood in names:
            return city
    return None

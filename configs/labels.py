# ----------------------------
# Localized default labels
# ----------------------------
LABELS = {
    "ja": {
        "item": "項目",
        "previous": "前期",
        "current": "当期",
        "column": "列 {n}",
        "report": "財務諸表",
        "unit": "円",
        "currency": "通貨 ({code})",
    },
    "en": {
        "item": "Item",
        "previous": "Previous",
        "current": "Current",
        "column": "Column {n}",
        "report": "Financial Statements",
        "unit": "JPY",
        "currency": "Currency ({code})",
    },
}

DEFAULT_LOCALE = "ja"

# Display suffix for formatted values, keyed by unit measure code
UNIT_DISPLAY_LABELS = {
    "JPY": "円",
    "USD": "ドル",
    "EUR": "ユーロ",
    "shares": "株",
    "percent": "%",
}

# ----------------------------
# CSV export headers
# ----------------------------
HIERARCHY_CSV_HEADERS = [
    "項目名", "階層", "前期", "当期", "増減", "増減率", "単位", "タクソノミ要素",
]

def get_label(key: str, locale: str = DEFAULT_LOCALE) -> str:
    labels = LABELS.get(locale, LABELS[DEFAULT_LOCALE])
    return labels[key]

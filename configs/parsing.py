import re

# ----------------------------
# Inline XBRL vocabulary
# ----------------------------
# Tag names arrive lowercased from both HTML backends
FACT_TAGS = {
    "ix:nonfraction", "ix:nonnumeric", "ix:numeric", "ix:fraction",
    "nonfraction", "nonnumeric",
}

TAXONOMY_PREFIXES = (
    "jppfs", "jpcrp", "jpdei", "jpigp", "tse",
    "us-gaap", "ifrs", "dei",
)

TAXONOMY_NAME_PATTERN = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in TAXONOMY_PREFIXES) + r")",
    re.IGNORECASE,
)

XBRL_SCHEME_PATTERN = re.compile(r"xbrl|edinet|iso4217", re.IGNORECASE)

# Attribute names read off a tagged element, in output order
TAG_ATTRIBUTES = (
    "name", "contextref", "unitref", "decimals", "scale", "format", "sign",
)

# ----------------------------
# Document type detection
# ----------------------------
DOCUMENT_TYPE_RULES = [
    # (document_type, attribute-name prefixes)
    ("edinet", ("jpdei_", "jpcrp_", "jpdei:", "jpcrp:")),
    ("tdnet", ("tse_", "tse-")),
]

# ----------------------------
# Financial table detection
# ----------------------------
FINANCIAL_KEYWORDS = (
    # Statement names
    "貸借対照表", "損益計算書", "キャッシュ・フロー計算書", "株主資本等変動計算書",
    "財政状態", "経営成績", "包括利益", "連結財務諸表", "財務諸表",
    # Account categories
    "資産", "負債", "純資産", "売上高", "売上", "収益", "費用", "利益", "営業",
    "balance sheet", "income statement", "cash flow", "statement of changes",
    "financial position", "financial performance", "comprehensive income",
    "assets", "liabilities", "equity", "revenue", "expenses", "profit", "loss",
    # Taxonomy hints
    "jppfs", "jpcrp", "xbrl",
)

ACCOUNT_CATEGORY_TERMS = (
    "資産", "負債", "純資産", "売上", "費用", "利益",
    "cash", "assets", "liabilities", "equity", "revenue", "expenses",
)

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

# rule name -> weight
TABLE_SCORE_WEIGHTS = {
    "heading_keyword": 3,
    "text_keyword": 2,
    "tagged_content": 5,
    "table_shape": 1,
    "account_column": 2,
}

MIN_TABLE_ROWS = 3
MIN_FIRST_ROW_CELLS = 2

# ----------------------------
# Table type inference
# ----------------------------
# table_type -> (title/text keywords, concept patterns)
TABLE_TYPE_RULES = [
    (
        "balance_sheet",
        ("貸借対照表", "財政状態", "balance sheet", "financial position"),
        ("jppfs_cor:BS", "BalanceSheet", "Assets", "Liabilities", "NetAssets", "Equity"),
    ),
    (
        "income_statement",
        ("損益計算書", "経営成績", "income statement", "profit and loss", "statement of operations"),
        ("jppfs_cor:PL", "ProfitAndLoss", "Revenue", "NetSales", "OperatingIncome", "ProfitLoss"),
    ),
    (
        "cash_flow",
        ("キャッシュ・フロー", "cash flow"),
        ("jppfs_cor:CF", "CashFlow", "CashAndCashEquivalents"),
    ),
    (
        "shareholder",
        ("大株主の状況", "大株主", "major shareholders"),
        ("jpcrp_cor:NameMajorShareholders", "Shareholder"),
    ),
]

# Minimum share of concepts that must match a type's patterns
CONCEPT_DENSITY_THRESHOLD = 0.3

# Fallback path: all keywords of any group must be present
FALLBACK_TYPE_RULES = [
    ("balance_sheet", [("資産", "負債"), ("貸借対照表",), ("財政状態",), ("assets", "liabilities")]),
    ("income_statement", [("売上", "利益"), ("損益計算書",), ("経営成績",), ("revenue", "profit")]),
    ("cash_flow", [("キャッシュ・フロー",), ("営業活動", "投資活動"), ("cash flow",)]),
    ("shareholder", [("大株主",), ("major shareholders",)]),
]

HEADER_SCAN_ROWS = 3

# Negative-amount glyphs
NEGATIVE_GLYPHS = ("△", "▲")

# ----------------------------
# Contexts
# ----------------------------
# Order matters: non-consolidated vocabulary contains the consolidated one
CONSOLIDATION_RULES = [
    ("non_consolidated", ("nonconsolidated", "non-consolidated", "non_consolidated", "individual", "個別")),
    ("consolidated", ("consolidated", "連結")),
]

# Order matters: "prior" must win over an embedded "instant"
PERIOD_REFERENCE_RULES = [
    ("previous", ("prior", "lastperiod", "previous", "lastyear", "前期", "前年")),
    ("current", ("current", "thisperiod", "instant", "thisyear", "当期", "当年")),
]

# Years back from the reference year -> fiscal year class
FISCAL_YEAR_OFFSETS = {
    0: "current",
    1: "current",
    2: "previous",
    3: "previous",
}

# ----------------------------
# Units
# ----------------------------
CURRENCY_SYMBOLS = {
    "JPY": "¥",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CNY": "¥",
    "KRW": "₩",
}

# measure local name -> (symbol, label)
MEASURE_LABELS = {
    "shares": ("株", "株式数"),
    "percent": ("%", "パーセント"),
    "ratio": ("%", "パーセント"),
    "pure": ("", "数値"),
}

# Substring of an undefined unit ref -> measure
UNIT_REFERENCE_RULES = [
    ("JPY", "iso4217:JPY"),
    ("USD", "iso4217:USD"),
    ("EUR", "iso4217:EUR"),
    ("Share", "xbrli:shares"),
    ("Percent", "xbrli:percent"),
    ("Ratio", "xbrli:percent"),
    ("Pure", "xbrli:pure"),
]

# ----------------------------
# Hierarchy
# ----------------------------
TOTAL_KEYWORDS = ("合計", "総額", "小計", "total", "subtotal")

NUMBERED_HEADING_PATTERN = re.compile(
    r"^\s*(?:(?:[0-9０-９]+|[IVX]+)[.．、)]|[Ⅰ-Ⅻ](?:[.．、\s]|$))"
)

INDENT_WIDTH = 2

STYLE_INDENT_PATTERN = re.compile(
    r"(padding-left|margin-left|text-indent)\s*:\s*(-?\d+(?:\.\d+)?)\s*(px|pt|em|rem)?",
    re.IGNORECASE,
)

# Pixels per hierarchy level for CSS indentation
INDENT_PX_PER_LEVEL = 10.0

# ----------------------------
# Flat-to-hierarchy column detection
# ----------------------------
ITEM_COLUMN_KEYWORDS = ("項目", "科目", "勘定科目", "名称", "item", "name", "account")
PREVIOUS_COLUMN_KEYWORDS = (
    "前期", "前年度", "前連結会計年度", "前事業年度",
    "previous", "prior", "last year",
)
CURRENT_COLUMN_KEYWORDS = (
    "当期", "当年度", "当連結会計年度", "当事業年度",
    "current", "this year",
)
CONCEPT_COLUMN_KEYWORDS = ("xbrl", "tag", "concept", "タグ", "要素")

# (pattern, label) in priority order
UNIT_LABEL_PATTERNS = [
    (re.compile(r"百万円"), "百万円"),
    (re.compile(r"千円"), "千円"),
    (re.compile(r"million\s*yen", re.IGNORECASE), "百万円"),
    (re.compile(r"thousand\s*yen", re.IGNORECASE), "千円"),
    (re.compile(r"円"), "円"),
    (re.compile(r"\byen\b", re.IGNORECASE), "円"),
    (re.compile(r"millions?\s+of\s+(?:u\.?s\.?\s+)?dollars", re.IGNORECASE), "百万ドル"),
]

DATE_PATTERN = re.compile(r"(\d{4})[年/\-.](\d{1,2})[月/\-.](\d{1,2})日?")

# report type -> keywords counted in headers and item names
REPORT_TYPE_KEYWORDS = {
    "貸借対照表": ("貸借対照表", "資産", "負債", "純資産", "balance sheet"),
    "損益計算書": ("損益計算書", "売上高", "営業利益", "経常利益", "当期純利益", "income statement"),
    "キャッシュ・フロー計算書": ("キャッシュ・フロー", "営業活動", "投資活動", "財務活動", "cash flow"),
}

# ----------------------------
# Comments / notes
# ----------------------------
COMMENT_HEADING_TAGS = ("h2", "h3", "h4")

COMMENT_KEYWORDS = (
    "注記", "重要な会計方針", "注釈", "備考", "事業", "セグメント",
    "notes", "accounting polic", "segment", "business",
)

RELATED_ITEM_TERMS = (
    "売上高", "売上総利益", "営業利益", "経常利益", "当期純利益",
    "資産", "負債", "純資産", "現金", "減価償却",
    "有形固定資産", "無形固定資産", "投資有価証券", "長期借入金",
    "資本金", "資本剰余金", "利益剰余金", "自己株式",
)

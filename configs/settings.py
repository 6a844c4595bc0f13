import os

# ----------------------------
# Extraction behaviour
# ----------------------------
LOCALE = os.getenv("IXTRACT_LOCALE", "ja")

# "wall_clock": compare period years to today's year
# "relative": latest period end date in the filing is current
FISCAL_YEAR_POLICY = os.getenv("IXTRACT_FISCAL_YEAR_POLICY", "wall_clock")

# "lxml" (full tree) or "html.parser" (tag soup)
PARSER_BACKEND = os.getenv("IXTRACT_PARSER_BACKEND", "lxml")

SCORE_THRESHOLD = int(os.getenv("IXTRACT_SCORE_THRESHOLD", 3))

BUILD_VIRTUAL_TABLE = os.getenv("IXTRACT_BUILD_VIRTUAL_TABLE", "1") == "1"

# ----------------------------
# Preserve-table-skeleton mode
# ----------------------------
TABLE_SKELETON_TAGS = {
    "table", "thead", "tbody", "tfoot", "tr", "th", "td",
    "caption", "colgroup", "col", "br",
}

# ----------------------------
# Enhanced mode
# ----------------------------
ALLOWED_TAGS = {
    # Structure
    "div", "span", "p", "br", "hr",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "dl", "dt", "dd",
    "b", "strong", "i", "em", "u", "sub", "sup", "small",
    # Tables
    "table", "thead", "tbody", "tfoot", "tr", "th", "td",
    "caption", "colgroup", "col",
    # Inline XBRL
    "ix:nonfraction", "ix:nonnumeric", "ix:fraction", "ix:continuation",
    "ix:footnote", "ix:numerator", "ix:denominator",
}

SAFE_XBRL_ATTRIBUTES = {
    "name", "contextref", "unitref", "decimals", "scale",
    "format", "sign", "id", "continuedat",
}

SAFE_HTML_ATTRIBUTES = {
    "colspan", "rowspan", "style", "align", "valign",
}

SAFE_STYLE_PROPERTIES = {
    "text-align", "vertical-align", "font-weight", "font-style",
    "text-decoration", "padding-left", "padding-right",
    "margin-left", "text-indent", "white-space", "width",
    "border", "border-top", "border-bottom", "border-left", "border-right",
}

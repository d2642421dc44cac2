import re

ALLOWED_PREFIXES = ("SELECT", "WITH")

FORBIDDEN_SQL = [
    r"\bINSERT\b", r"\bUPDATE\b", r"\bDELETE\b", r"\bDROP\b", r"\bALTER\b",
    r"\bCREATE\b", r"\bTRUNCATE\b", r"\bEXEC\b", r"\bEXECUTE\b",
    r"\bSP_EXECUTESQL\b", r"\bXP_\w*", r"\bGRANT\b", r"\bREVOKE\b",
    r"\bMERGE\b", r"\bBULK\s+INSERT\b",
]

_FORBIDDEN_RE = [re.compile(p, re.IGNORECASE) for p in FORBIDDEN_SQL]
_TRAILING_TERMINATOR = re.compile(r";\s*$")

# Logical source tags, checked in order
TABLE_TAGS = [
    ("FACT_SALES_ORDER", "primary"),
    ("FACT_SECONDARY_SALES", "secondary"),
    ("DIMPRODUCT", "product"),
    ("DIMDISTRIBUTION", "distributor"),
]


def is_sql_safe(sql: str) -> bool:
    """Read-only gate applied to every generated query before execution."""
    s = (sql or "").strip()
    if not s.upper().startswith(ALLOWED_PREFIXES):
        return False
    for pat in _FORBIDDEN_RE:
        if pat.search(s):
            return False
    # prevent multi-statement
    if ";" in _TRAILING_TERMINATOR.sub("", s, count=1):
        return False
    return True


def clean_generated_sql(text_out: str) -> str:
    """Strip markdown fences, wrapping quotes and a trailing terminator from model output."""
    if not text_out:
        return ""
    s = text_out.strip()
    m = re.search(r"```(?:sql)?\s*(.*?)```", s, re.IGNORECASE | re.DOTALL)
    if m:
        s = m.group(1).strip()
    s = re.sub(r"```(?:sql)?", "", s, flags=re.IGNORECASE).strip()
    s = re.sub(r"^[\"']|[\"']$", "", s).strip()
    return _TRAILING_TERMINATOR.sub("", s, count=1).strip()


def extract_table_tag(sql: str) -> str:
    s = (sql or "").upper()
    for table, tag in TABLE_TAGS:
        if table in s:
            return tag
    return "unknown"

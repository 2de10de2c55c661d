"""Lexical helpers for SQL statements.

The driver never parses SQL. It only needs to know whether a statement reads
(and so goes to the query endpoint) and, for diagnostics, which table a
select-class statement reads from.
"""

import re

SELECT_PREFIXES = ("SELECT", "SHOW", "DESC")

_WHITESPACE = re.compile(r"\s")


def is_select(sql: str) -> bool:
    """Return True if ``sql`` is a read statement.

    Example:
        >>> is_select("  select * from users")
        True
        >>> is_select("INSERT INTO users VALUES (1)")
        False
    """
    return sql.lstrip().upper().startswith(SELECT_PREFIXES)


def extract_table_name(sql: str) -> str:
    """Return the token following the first ``FROM`` of a read statement.

    Backticks and single quotes around the name are stripped. The result is
    only a label: joins, subqueries and anything else unusual may give an
    empty or partial name.
    """
    if not is_select(sql):
        return ""

    # Empty tokens are kept so that "FROM  users" yields "" rather than "users".
    tokens = _WHITESPACE.split(sql)
    for i, token in enumerate(tokens[:-1]):
        if token.upper() == "FROM":
            return tokens[i + 1].strip("`'").strip()
    return ""

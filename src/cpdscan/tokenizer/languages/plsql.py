"""PL/SQL lexer.

PL/SQL is case-insensitive, so keywords and identifiers are compared in
upper case. Ignored comments are replaced by a placeholder rather than
dropped, which keeps commented-out regions from gluing unrelated code
together.
"""

from cpdscan.tokenizer.base import REPLACE, ErrorRule, RegexLexer, Rule, operator_pattern

KEYWORDS = frozenset(
    """
    all alter and any array as asc begin between body bulk by case cast check close
    collect commit constant create cursor declare default delete desc distinct else elsif
    end exception exists exit fetch for forall from function goto grant group having if
    immediate in index insert interval into is limit like loop merge minus not null of on
    open or order others out package pragma procedure raise record ref replace return
    returning reverse rollback rowtype savepoint select set sql subtype table then to
    trigger type union unique update using values varchar2 view when where while with
    number integer boolean date timestamp char varchar clob blob true false execute
    """.split()
)

OPERATORS = [
    ":=", "=>", "..", "||", "<>", "!=", "~=", "^=", "<=", ">=", "**", "<<", ">>",
    "(", ")", ";", ",", ".", ":", "=", "<", ">", "+", "-", "*", "/", "%", "@", "&", "|",
]

RULES = [
    Rule(None, r"\s+"),
    Rule("COMMENT", r"--[^\n]*"),
    Rule("COMMENT", r"(?s:/\*.*?\*/)"),
    ErrorRule(r"/\*", "unterminated comment"),
    Rule("QUOTED_LITERAL", r"(?s:[nN]?[qQ]'(?:\[.*?\]|\{.*?\}|\(.*?\)|<.*?>|!.*?!|#.*?#|\|.*?\|)')"),
    Rule("STRING_LITERAL", r"[nN]?'(?:[^']|'')*'"),
    ErrorRule(r"[nN]?'", "unterminated string literal"),
    Rule("FLOAT_LITERAL", r"(?:\d+\.(?!\.)\d*|\.\d+)(?:[eE][+-]?\d+)?[fFdD]?|\d+[eE][+-]?\d+[fFdD]?"),
    Rule("INTEGER_LITERAL", r"\d+"),
    Rule("QUOTED_IDENTIFIER", r'"[^"\n]+"'),
    ErrorRule(r'"', "unterminated quoted identifier"),
    Rule("IDENTIFIER", r"[A-Za-z][\w$#]*"),
    Rule("OPERATOR", operator_pattern(OPERATORS)),
]

PLSQL = RegexLexer(
    name="plsql",
    extensions=(".sql", ".pls", ".plb", ".pck", ".pks", ".pkb", ".pkh", ".trg", ".prc", ".fnc", ".tps", ".tpb"),
    rules=RULES,
    keywords=KEYWORDS,
    case_insensitive=True,
    fold_case=True,
    literal_kinds=frozenset({"STRING_LITERAL", "QUOTED_LITERAL", "INTEGER_LITERAL", "FLOAT_LITERAL"}),
    identifier_kinds=frozenset({"IDENTIFIER", "QUOTED_IDENTIFIER"}),
    comment_policy=REPLACE,
)

"""Java lexer.

Comments never take part in matching. Annotations, including their
argument lists, form the annotation class and are dropped when
``ignore_annotations`` is set.
"""

from functools import partial

from cpdscan.tokenizer.base import ErrorRule, RegexLexer, Rule, mark_bracketed, operator_pattern

KEYWORDS = frozenset(
    """
    abstract assert boolean break byte case catch char class const continue default do
    double else enum extends final finally float for goto if implements import instanceof
    int interface long native new package private protected public return short static
    strictfp super switch synchronized this throw throws transient try void volatile while
    true false null var record yield sealed permits non-sealed
    """.split()
)

OPERATORS = [
    ">>>=", "<<=", ">>=", ">>>", "...", "->", "::", "++", "--", "&&", "||", "==", "!=",
    "<=", ">=", "+=", "-=", "*=", "/=", "&=", "|=", "^=", "%=", "<<", ">>",
    "(", ")", "{", "}", "[", "]", ";", ",", ".", "@", "=", ">", "<", "!", "~", "?", ":",
    "+", "-", "*", "/", "&", "|", "^", "%",
]

IDENT = r"[A-Za-z_$][\w$]*"

RULES = [
    Rule(None, r"\s+"),
    Rule("COMMENT", r"//[^\n]*"),
    Rule("COMMENT", r"(?s:/\*.*?\*/)"),
    ErrorRule(r"/\*", "unterminated comment"),
    Rule("TEXT_BLOCK", r'(?s:"""[ \t]*\n.*?(?<!\\)""")'),
    ErrorRule(r'"""', "unterminated text block"),
    Rule("STRING_LITERAL", r'"(?:[^"\\\n]|\\.)*"'),
    ErrorRule(r'"', "unterminated string literal"),
    Rule("CHARACTER_LITERAL", r"'(?:[^'\\\n]|\\.)+'"),
    ErrorRule(r"'", "unterminated character literal"),
    Rule("INTEGER_LITERAL", r"0[xX][0-9a-fA-F_]+[lL]?|0[bB][01_]+[lL]?"),
    Rule(
        "FLOATING_POINT_LITERAL",
        r"(?:\d[\d_]*\.\d[\d_]*|\d[\d_]*\.(?![\w.])|\.\d[\d_]*)(?:[eE][+-]?\d+)?[fFdD]?"
        r"|\d[\d_]*[eE][+-]?\d+[fFdD]?|\d[\d_]*[fFdD]",
    ),
    Rule("INTEGER_LITERAL", r"\d[\d_]*[lL]?"),
    Rule("ANNOTATION", rf"@(?!interface\b)\s*{IDENT}(?:\s*\.\s*{IDENT})*"),
    Rule("IDENTIFIER", IDENT),
    Rule("OPERATOR", operator_pattern(OPERATORS)),
]

JAVA = RegexLexer(
    name="java",
    extensions=(".java",),
    rules=RULES,
    keywords=KEYWORDS,
    literal_kinds=frozenset(
        {
            "STRING_LITERAL",
            "TEXT_BLOCK",
            "CHARACTER_LITERAL",
            "INTEGER_LITERAL",
            "FLOATING_POINT_LITERAL",
        }
    ),
    annotation_kinds=frozenset({"ANNOTATION", "ANNOTATION_ARGUMENT"}),
    postprocess=partial(mark_bracketed, trigger_kind="ANNOTATION", marked_kind="ANNOTATION_ARGUMENT"),
)

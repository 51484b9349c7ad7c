"""C and C++ lexer.

Preprocessor directives are single tokens (continuation lines included).
Conditional-compilation regions such as ``#if 0`` ... ``#endif`` are removed
beforehand by skip-block elision.
"""

from cpdscan.tokenizer.base import ErrorRule, RegexLexer, Rule, operator_pattern

KEYWORDS = frozenset(
    """
    alignas alignof and and_eq asm auto bitand bitor bool break case catch char char8_t
    char16_t char32_t class compl concept const consteval constexpr constinit const_cast
    continue co_await co_return co_yield decltype default delete do double dynamic_cast
    else enum explicit export extern false float for friend goto if inline int long
    mutable namespace new noexcept not not_eq nullptr operator or or_eq private protected
    public register reinterpret_cast requires return short signed sizeof static
    static_assert static_cast struct switch template this thread_local throw true try
    typedef typeid typename union unsigned using virtual void volatile wchar_t while xor
    xor_eq restrict _Bool _Complex
    """.split()
)

OPERATORS = [
    "<=>", "<<=", ">>=", "->*", "...", "->", "::", "++", "--", "&&", "||", "==", "!=",
    "<=", ">=", "+=", "-=", "*=", "/=", "&=", "|=", "^=", "%=", "<<", ">>", ".*", "##",
    "(", ")", "{", "}", "[", "]", ";", ",", ".", "=", ">", "<", "!", "~", "?", ":",
    "+", "-", "*", "/", "&", "|", "^", "%", "#",
]

ENCODING_PREFIX = r"(?:u8|u|U|L)?"

RULES = [
    Rule(None, r"\s+"),
    Rule(None, r"\\\r?\n"),
    Rule("COMMENT", r"//[^\n]*"),
    Rule("COMMENT", r"(?s:/\*.*?\*/)"),
    ErrorRule(r"/\*", "unterminated comment"),
    Rule("PREPROCESSOR", r"#[ \t]*[A-Za-z_]\w*(?:\\\r?\n|[^\n])*"),
    Rule("STRING_LITERAL", rf'{ENCODING_PREFIX}R"(?s:(?P<delim>[^()\\\s]{{0,16}})\(.*?\)(?P=delim))"'),
    Rule("STRING_LITERAL", rf'{ENCODING_PREFIX}"(?:[^"\\\n]|\\.)*"'),
    ErrorRule(rf'{ENCODING_PREFIX}R?"', "unterminated string literal"),
    Rule("CHARACTER_LITERAL", rf"{ENCODING_PREFIX}'(?:[^'\\\n]|\\.)+'"),
    ErrorRule(rf"{ENCODING_PREFIX}'", "unterminated character literal"),
    Rule(
        "FLOATING_POINT_LITERAL",
        r"(?:\d[\d']*\.\d*|\.\d[\d']*)(?:[eE][+-]?\d+)?[fFlL]?|\d[\d']*[eE][+-]?\d+[fFlL]?",
    ),
    Rule("INTEGER_LITERAL", r"(?:0[xX][0-9a-fA-F']+|0[bB][01']+|\d[\d']*)[uUlLzZ]*"),
    Rule("IDENTIFIER", r"[A-Za-z_]\w*"),
    Rule("OPERATOR", operator_pattern(OPERATORS)),
]

CPP = RegexLexer(
    name="cpp",
    extensions=(".c", ".h", ".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx", ".c++", ".h++"),
    rules=RULES,
    keywords=KEYWORDS,
    literal_kinds=frozenset(
        {"STRING_LITERAL", "CHARACTER_LITERAL", "INTEGER_LITERAL", "FLOATING_POINT_LITERAL"}
    ),
)

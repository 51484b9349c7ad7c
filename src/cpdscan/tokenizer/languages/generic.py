"""Language-agnostic lexer: words, numbers, quoted strings and punctuation."""

from cpdscan.tokenizer.base import RegexLexer, Rule

ANY = RegexLexer(
    name="any",
    extensions=None,
    rules=[
        Rule(None, r"\s+"),
        Rule("STRING", r'"(?:[^"\\\n]|\\.)*"'),
        Rule("STRING", r"'(?:[^'\\\n]|\\.)*'"),
        Rule("NUMBER", r"\d[\w.]*"),
        Rule("IDENTIFIER", r"\w+"),
        Rule("PUNCTUATION", r"[^\w\s]"),
    ],
    literal_kinds=frozenset({"STRING", "NUMBER"}),
    comment_kinds=frozenset(),
)

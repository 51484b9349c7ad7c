"""Built-in languages."""

from cpdscan.tokenizer.languages.cpp import CPP
from cpdscan.tokenizer.languages.generic import ANY
from cpdscan.tokenizer.languages.java import JAVA
from cpdscan.tokenizer.languages.plsql import PLSQL
from cpdscan.tokenizer.languages.python import PYTHON

BUILTIN_LEXERS = [JAVA, CPP, PLSQL, PYTHON, ANY]

__all__ = ["BUILTIN_LEXERS", "ANY", "CPP", "JAVA", "PLSQL", "PYTHON"]

"""
Token-kind contract shared by the niftel scanner and parser.

Every token kind is a distinct string tag. The parser depends on this module
exactly: adding a kind, or changing which lexemes map to which kind, is a
breaking change for both sides.

Exports:
    - One constant per token kind (EOF, IDENT, NUMBER, ...) and TOKEN_KINDS
    - single_char_tokens, double_char_tokens: punctuation and operator lexemes
    - keyword_tokens, literal_keywords: word-shaped lexemes
    - token_hashmap: union of all lexeme → kind tables
    - reserved_kinds: kinds that end a command's argument list
"""

# Sentinels and literals
EOF = "EOF"
ERROR = "ERROR"
IDENT = "IDENT"
NUMBER = "NUMBER"
STRING = "STRING"
TRUE = "TRUE"
FALSE = "FALSE"
NIL = "NIL"

# Operators
EQUAL = "EQUAL"
EQUAL_EQUAL = "EQUAL_EQUAL"
BANG = "BANG"
BANG_EQUAL = "BANG_EQUAL"
STAR = "STAR"
SLASH = "SLASH"
PLUS = "PLUS"
MINUS = "MINUS"
LESS = "LESS"
LESS_EQUAL = "LESS_EQUAL"
GREATER = "GREATER"
GREATER_EQUAL = "GREATER_EQUAL"

# Delimiters
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"

# Reserved words
IF = "IF"
ELSE = "ELSE"
FOR = "FOR"
IN = "IN"
VAR = "VAR"
REPO = "REPO"
BRANCH = "BRANCH"


single_char_tokens: dict[str, str] = {
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    "[": LBRACKET,
    "]": RBRACKET,
    "+": PLUS,
    "-": MINUS,
    "*": STAR,
    "/": SLASH,
    "=": EQUAL,
    "!": BANG,
    "<": LESS,
    ">": GREATER,
}

double_char_tokens: dict[str, str] = {
    "==": EQUAL_EQUAL,
    "!=": BANG_EQUAL,
    "<=": LESS_EQUAL,
    ">=": GREATER_EQUAL,
}

keyword_tokens: dict[str, str] = {
    "if": IF,
    "else": ELSE,
    "for": FOR,
    "in": IN,
    "var": VAR,
    "repo": REPO,
    "branch": BRANCH,
}

literal_keywords: dict[str, str] = {
    "true": TRUE,
    "false": FALSE,
    "nil": NIL,
}

token_hashmap: dict[str, str] = {
    **single_char_tokens,
    **double_char_tokens,
    **keyword_tokens,
    **literal_keywords,
}

reserved_kinds: frozenset[str] = frozenset(keyword_tokens.values())

TOKEN_KINDS: frozenset[str] = frozenset(token_hashmap.values()) | {
    EOF,
    ERROR,
    IDENT,
    NUMBER,
    STRING,
}


class Token:
    def __init__(self, type, value=None, arg=None, line=1, text=""):
        self.type = type    # SKIP, SECTION, INSTRUCTION or EOF
        self.value = value  # section name or mnemonic
        self.arg = arg      # instruction argument ("" when absent)
        self.line = line
        self.text = text    # the raw source line

    def __repr__(self):
        if self.type == "INSTRUCTION":
            return f"{self.type}({self.value!r}, {self.arg!r})"
        if self.value is not None:
            return f"{self.type}({self.value!r})"
        return f"{self.type}"


def is_comment(line: str) -> bool:
    return line == "" or line[0] in "/#"


def is_section_header(line: str) -> bool:
    return line.startswith("::") and line.endswith(":")


def split_lines(text: str) -> list[str]:
    # split on \n only, dropping a CR left over from CRLF endings;
    # a lone \r stays part of its line
    return [ln[:-1] if ln.endswith("\r") else ln for ln in text.split("\n")]


def classify(raw: str, line_no: int) -> Token:
    if is_comment(raw):
        return Token("SKIP", line=line_no, text=raw)

    if is_section_header(raw):
        return Token("SECTION", raw.strip(":"), line=line_no, text=raw)

    # mnemonic, then the rest of the line verbatim
    mnemonic, _, arg = raw.partition(" ")
    return Token("INSTRUCTION", mnemonic, arg, line=line_no, text=raw)


def tokenize(text: str) -> list[Token]:
    """Every line of `text` as a token (SKIP lines included), without EOF."""
    return [classify(raw, i) for i, raw in enumerate(split_lines(text), start=1)]


class Lexer:
    def __init__(self, text):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def next_line(self) -> Token:
        if self.pos >= len(self.tokens):
            return Token("EOF", line=len(self.tokens))
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    # comments and blank lines never reach the parser
    def get_next_token(self) -> Token:
        tok = self.next_line()
        while tok.type == "SKIP":
            tok = self.next_line()
        return tok

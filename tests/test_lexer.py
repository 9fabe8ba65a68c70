from lexer import Lexer, tokenize


def _types(src):
    return [(t.type, t.value) for t in tokenize(src)]


def test_line_classes():
    src = "# comment\n/ also a comment\n\n::loop:\npush 1\nPRINT\n"
    assert _types(src) == [
        ("SKIP", None),
        ("SKIP", None),
        ("SKIP", None),
        ("SECTION", "loop"),
        ("INSTRUCTION", "push"),
        ("INSTRUCTION", "PRINT"),
        ("SKIP", None),
    ]


def test_argument_is_rest_of_line():
    tok = tokenize('push "hello big world"')[0]
    assert tok.value == "push"
    assert tok.arg == '"hello big world"'


def test_missing_argument_is_empty():
    assert tokenize("dup")[0].arg == ""
    assert tokenize("push ")[0].arg == ""


def test_section_name_strips_all_colons():
    assert tokenize("::a:")[0].value == "a"
    assert tokenize(":::")[0].value == ""


def test_crlf_line_endings():
    toks = tokenize("push 1\r\n::x:\r\n")
    assert toks[0].arg == "1"
    assert toks[1].type == "SECTION" and toks[1].value == "x"


def test_lines_are_not_trimmed():
    tok = tokenize("  push 1")[0]
    assert tok.type == "INSTRUCTION"
    assert tok.value == ""


def test_get_next_token_skips_comments_and_tracks_lines():
    lexer = Lexer("# hi\n\npush 1\n::s:\n")
    tok = lexer.get_next_token()
    assert (tok.type, tok.line) == ("INSTRUCTION", 3)
    tok = lexer.get_next_token()
    assert (tok.type, tok.line) == ("SECTION", 4)
    assert lexer.get_next_token().type == "EOF"


def test_lone_carriage_return_is_not_a_line_break():
    toks = tokenize('push "a\rb"\nprint\n')
    assert len(toks) == 3
    assert toks[0].arg == '"a\rb"'

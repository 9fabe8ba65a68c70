import pytest

from bytecode import Instruction
from errors import ParseError, ParseErrorKind
from parser import decode_literal, parse_program


def test_unnamed_instructions_become_main():
    program = parse_program("push 1\nprint\n")
    assert program.section_names() == ["main"]
    assert list(program.main_section().instructions) == [
        Instruction("PUSH", 1),
        Instruction("PRINT"),
    ]


def test_sections_in_source_order():
    src = "push 1\njump a\n::a:\npush 2\n::b:\npush 3\n"
    program = parse_program(src)
    assert program.section_names() == ["main", "a", "b"]
    assert program.find_section("b").instructions == (Instruction("PUSH", 3),)


def test_header_without_instructions_is_dropped():
    program = parse_program("::empty:\n::real:\npush 1\n")
    assert program.section_names() == ["real"]
    assert program.find_section("empty") is None


def test_only_named_section_has_no_main():
    program = parse_program("::foo:\npush 1\n")
    assert program.main_section() is None


def test_duplicate_names_first_match_wins():
    program = parse_program("::a:\npush 1\n::a:\npush 2\n")
    assert program.section_names() == ["a", "a"]
    assert program.find_section("a").instructions == (Instruction("PUSH", 1),)


def test_mnemonics_are_case_insensitive():
    program = parse_program("PuSh 1\nDUP\nIfJmp x\n")
    ops = [ins.opcode for ins in program.main_section().instructions]
    assert ops == ["PUSH", "DUP", "IFJMP"]


def test_jump_label_kept_verbatim():
    ins = parse_program("jump some label\n").main_section().instructions[0]
    assert ins == Instruction("JUMP", "some label")


def test_instructions_remember_source_line():
    program = parse_program("# c\n\npush 1\nprint\n")
    assert [ins.line for ins in program.main_section().instructions] == [3, 4]


@pytest.mark.parametrize(
    "text, expected",
    [
        ('"hi"', "hi"),
        ('"hello world"', "hello world"),
        ('"a\\nb\\r"', "a\nb\r"),
        ('""', ""),
        ("3.5", 3.5),
        (".5", 0.5),
        ("2.", 2.0),
        ("-1.25", -1.25),
        ("1.5e3", 1500.0),
        ("true", True),
        ("false", False),
        ("0", 0),
        ("+7", 7),
        (str(2**64 - 1), 2**64 - 1),
    ],
)
def test_decode_literal(text, expected):
    value = decode_literal(text)
    assert type(value) is type(expected)
    assert value == expected


@pytest.mark.parametrize("text", ["-1", "abc", "1_000", "True", "0x10", str(2**64), "1.2.3", "1.5x", " 1"])
def test_decode_literal_rejects(text):
    with pytest.raises(ValueError):
        decode_literal(text)


def test_push_without_value():
    with pytest.raises(ParseError) as exc:
        parse_program("push\n")
    assert exc.value.kind is ParseErrorKind.MISSING_OPERAND
    assert exc.value.line_no == 1


@pytest.mark.parametrize("src", ["jump\n", "ifjmp\n", "jump \n"])
def test_jumps_need_a_label(src):
    with pytest.raises(ParseError) as exc:
        parse_program(src)
    assert exc.value.kind is ParseErrorKind.MISSING_OPERAND


def test_invalid_literal():
    with pytest.raises(ParseError) as exc:
        parse_program("push 1\npush 3.x\n")
    assert exc.value.kind is ParseErrorKind.INVALID_LITERAL
    assert exc.value.line_no == 2


def test_unknown_instruction_names_line():
    with pytest.raises(ParseError) as exc:
        parse_program("push 1\nfrobnicate 3\n")
    assert exc.value.kind is ParseErrorKind.UNKNOWN_INSTRUCTION
    assert "frobnicate 3" in str(exc.value)
    assert "line 2" in str(exc.value)


def test_labels_are_not_checked_at_load_time():
    program = parse_program("jump nowhere\n")
    assert program.find_section("nowhere") is None

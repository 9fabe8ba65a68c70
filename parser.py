import re

from bytecode import MAIN_SECTION, OPCODES, Instruction, Program, Section
from errors import ParseError, ParseErrorKind
from lexer import Lexer
from values import int_in_range


FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
INT_RE = re.compile(r"\+?[0-9]+")


def decode_string(text: str) -> str:
    return text.strip('"').replace("\\n", "\n").replace("\\r", "\r")


def decode_literal(text: str):
    """Classify a push argument: string, float, bool, then unsigned int.

    Raises ValueError when the chosen numeric form does not parse.
    """
    if text.startswith('"') and text.endswith('"'):
        return decode_string(text)

    if "." in text:
        if not FLOAT_RE.fullmatch(text):
            raise ValueError(f"invalid float literal: {text}")
        return float(text)

    if text == "true":
        return True
    if text == "false":
        return False

    if not INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer literal: {text}")
    n = int(text)
    if not int_in_range(n):
        raise ValueError(f"integer literal out of range: {text}")
    return n


class Parser:
    def __init__(self, lexer):
        self.lexer = lexer
        self.current_token = self.lexer.get_next_token()

        self.sections = []
        self.current_section = None  # name from the last header, None before any
        self.pending = []            # instructions not yet flushed into a Section

    def eat(self, token_type):
        if self.current_token.type != token_type:
            tok = self.current_token
            raise Exception(f"Expected {token_type}, got {tok.type} at line {tok.line}")
        self.current_token = self.lexer.get_next_token()

    def error_here(self, kind, message):
        tok = self.current_token
        raise ParseError(kind, message, line_no=tok.line, line=tok.text)

    # ---------- TOP LEVEL ----------
    def parse(self) -> Program:
        while self.current_token.type != "EOF":
            if self.current_token.type == "SECTION":
                self.section_header()
            else:
                self.pending.append(self.instruction())
                self.eat("INSTRUCTION")

        self.flush()
        return Program(self.sections)

    def flush(self):
        # a header with no instructions under it never becomes a section
        if not self.pending:
            return
        name = self.current_section if self.current_section is not None else MAIN_SECTION
        self.sections.append(Section(name, self.pending))
        self.current_section = None
        self.pending = []

    def section_header(self):
        self.flush()
        self.current_section = self.current_token.value
        self.eat("SECTION")

    # ---------- INSTRUCTIONS ----------
    def instruction(self) -> Instruction:
        tok = self.current_token
        opcode = OPCODES.get(tok.value.lower())
        if opcode is None:
            self.error_here(ParseErrorKind.UNKNOWN_INSTRUCTION, f"Unknown instruction: {tok.text}")

        if opcode == "PUSH":
            return Instruction(opcode, self.push_value(), line=tok.line)

        if opcode in ("JUMP", "IFJMP"):
            if tok.arg == "":
                self.error_here(ParseErrorKind.MISSING_OPERAND, f"{tok.value.lower()} requires a label")
            return Instruction(opcode, tok.arg, line=tok.line)

        return Instruction(opcode, line=tok.line)

    def push_value(self):
        text = self.current_token.arg
        if text == "":
            self.error_here(ParseErrorKind.MISSING_OPERAND, "push requires a value")
        try:
            return decode_literal(text)
        except ValueError as e:
            self.error_here(ParseErrorKind.INVALID_LITERAL, str(e))


def parse_program(text: str) -> Program:
    return Parser(Lexer(text)).parse()

from enum import Enum


class ParseErrorKind(Enum):
    MISSING_OPERAND = "missing operand"
    INVALID_LITERAL = "invalid literal"
    UNKNOWN_INSTRUCTION = "unknown instruction"


class FaultKind(Enum):
    STACK_UNDERFLOW = "stack underflow"
    TYPE_MISMATCH = "type mismatch"
    DIVISION_BY_ZERO = "division by zero"
    UNKNOWN_LABEL = "unknown label"
    NO_MAIN_SECTION = "no main section"
    ARITHMETIC_OVERFLOW = "arithmetic overflow"
    STEP_LIMIT_EXCEEDED = "step limit exceeded"


class StackVMError(Exception):
    pass


class ParseError(StackVMError):
    def __init__(self, kind: ParseErrorKind, message: str, line_no: int | None = None, line: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.line_no = line_no
        self.line = line

    def format(self, indent: str = "") -> str:
        lines = [f"{indent}Parse error ({self.kind.value}): {self.message}"]
        if self.line_no is not None:
            lines.append(f"{indent}  line {self.line_no}: {self.line if self.line is not None else ''}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()


class RuntimeFault(StackVMError):
    def __init__(self, kind: FaultKind, message: str, ip: int | None = None, instruction=None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.ip = ip
        self.instruction = instruction  # bytecode.Instruction being executed, if any

    def format(self, indent: str = "") -> str:
        lines = [f"{indent}Runtime error ({self.kind.value}): {self.message}"]
        if self.ip is not None:
            lines.append(f"{indent}  ip={self.ip:04d}")
        if self.instruction is not None:
            where = f" (line {self.instruction.line})" if self.instruction.line is not None else ""
            lines.append(f"{indent}  at {self.instruction}{where}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()

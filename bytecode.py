from values import debug_repr, escape_text, values_equal


# mnemonic -> opcode
OPCODES = {
    "push": "PUSH",
    "jump": "JUMP",
    "ifjmp": "IFJMP",
    "eq": "EQ",
    "ne": "NE",
    "and": "AND",
    "or": "OR",
    "not": "NOT",
    "add": "ADD",
    "sub": "SUB",
    "mul": "MUL",
    "div": "DIV",
    "mod": "MOD",
    "dup": "DUP",
    "swap": "SWAP",
    "over": "OVER",
    "rot": "ROT",
    "drop": "DROP",
    "print": "PRINT",
    "exit": "EXIT",
}

JUMP_OPCODES = ("JUMP", "IFJMP")

# names shown in debug traces
TRACE_NAMES = {"IFJMP": "IfJmp", "EQ": "EQ", "NE": "NE"}

MAIN_SECTION = "main"


class Instruction:
    __slots__ = ("opcode", "arg", "line")

    def __init__(self, opcode, arg=None, line=None):
        self.opcode = opcode  # one of OPCODES.values()
        self.arg = arg        # PUSH: value, JUMP/IFJMP: label, else None
        self.line = line      # 1-based source line, if known

    def __eq__(self, other):
        if not isinstance(other, Instruction) or self.opcode != other.opcode:
            return False
        if self.opcode == "PUSH":
            return values_equal(self.arg, other.arg)
        return self.arg == other.arg

    def __hash__(self):
        return hash((self.opcode, type(self.arg), self.arg))

    def __repr__(self):
        if self.opcode == "PUSH":
            return f"Push({debug_repr(self.arg)})"
        name = TRACE_NAMES.get(self.opcode, self.opcode.capitalize())
        if self.opcode in JUMP_OPCODES:
            return f'{name}("{escape_text(self.arg)}")'
        return name


class Section:
    def __init__(self, name: str, instructions):
        self.name = name
        self.instructions = tuple(instructions)

    def __len__(self):
        return len(self.instructions)

    def __repr__(self):
        return f"Section({self.name!r}, {len(self.instructions)} instructions)"


class Program:
    def __init__(self, sections=()):
        self.sections = tuple(sections)
        # first occurrence wins for duplicate names
        self._index = {}
        for i, section in enumerate(self.sections):
            self._index.setdefault(section.name, i)

    def find_section(self, name: str):
        i = self._index.get(name)
        if i is None:
            return None
        return self.sections[i]

    def main_section(self):
        return self.find_section(MAIN_SECTION)

    def section_names(self):
        return [s.name for s in self.sections]

    def __len__(self):
        return len(self.sections)

    def __iter__(self):
        return iter(self.sections)

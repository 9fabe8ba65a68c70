import sys

import colorama
from colorama import Fore, Style

from errors import FaultKind, RuntimeFault
from values import debug_repr, format_value, int_in_range, is_int, values_equal


class VM:
    def __init__(self, program, debug: bool = False, out=None, color: bool = False):
        self.program = program      # bytecode.Program, read-only during a run
        self.debug = debug          # trace stack + instruction before each step
        self.out = out if out is not None else sys.stdout
        self.color = color

        self.max_steps = None  # set to an int to guard against infinite loops

        self.ip = 0                 # cursor into the working instruction list
        self.stack = []             # top of stack is stack[-1]
        self.instructions = []      # working copy of main, grows when jumps splice

        self._colorama_inited = False

    def _ensure_colorama(self):
        if self._colorama_inited:
            return
        self._colorama_inited = True
        # Enables ANSI sequences on Windows terminals; no-op elsewhere.
        colorama.just_fix_windows_console()

    # ---------- faults and stack helpers ----------
    def current_instruction(self):
        if 0 <= self.ip < len(self.instructions):
            return self.instructions[self.ip]
        return None

    def fault(self, kind: FaultKind, message: str):
        raise RuntimeFault(kind, message, ip=self.ip, instruction=self.current_instruction())

    def pop(self, context: str):
        if not self.stack:
            self.fault(FaultKind.STACK_UNDERFLOW, f"Not enough values on the stack to {context}")
        return self.stack.pop()

    def pop_two(self, context: str):
        # a is the old top, b the value beneath it
        a = self.pop(context)
        b = self.pop(context)
        return a, b

    def peek(self, context: str):
        if not self.stack:
            self.fault(FaultKind.STACK_UNDERFLOW, f"Nothing to {context}")
        return self.stack[-1]

    def require_bool(self, value, context: str) -> bool:
        if isinstance(value, bool):
            return value
        self.fault(FaultKind.TYPE_MISMATCH, f"Cannot {context} non-boolean value {debug_repr(value)}")

    def check_int(self, n: int, context: str) -> int:
        if not int_in_range(n):
            self.fault(FaultKind.ARITHMETIC_OVERFLOW, f"Integer overflow in {context}: result {n} is out of range")
        return n

    # ---------- setup ----------
    def load_main(self):
        main = self.program.main_section()
        if main is None:
            raise RuntimeFault(FaultKind.NO_MAIN_SECTION, "No main section found")
        self.instructions = list(main.instructions)
        self.ip = 0
        self.stack = []

    def splice(self, label: str):
        section = self.program.find_section(label)
        if section is None:
            self.fault(FaultKind.UNKNOWN_LABEL, f"Unknown label: {label}")
        # the jump is replaced by the section body; ip stays on its first instruction
        self.instructions[self.ip:self.ip + 1] = section.instructions

    # ---------- tracing ----------
    def trace(self, instruction):
        stack = "[" + ", ".join(debug_repr(v) for v in self.stack) + "]"
        stack_line = f"Stack: {stack}"
        ins_line = f"Running Instruction: {instruction!r}"
        if self.color:
            self._ensure_colorama()
            stack_line = f"{Fore.LIGHTBLACK_EX}{stack_line}{Style.RESET_ALL}"
            ins_line = f"{Fore.CYAN}{ins_line}{Style.RESET_ALL}"
        self.out.write(stack_line + "\n")
        self.out.write(ins_line + "\n")

    # ---------- execution ----------
    def arith(self, opcode: str):
        names = {"ADD": "add", "SUB": "subtract", "MUL": "multiply", "DIV": "divide", "MOD": "modulo"}
        context = names[opcode]
        a, b = self.pop_two(context)

        if is_int(a) and is_int(b):
            if opcode in ("DIV", "MOD") and b == 0:
                self.fault(FaultKind.DIVISION_BY_ZERO, "Cannot divide by zero")
            if opcode == "ADD":
                return self.check_int(a + b, context)
            if opcode == "SUB":
                return self.check_int(a - b, context)
            if opcode == "MUL":
                return self.check_int(a * b, context)
            if opcode == "DIV":
                return a // b
            return a % b

        if isinstance(a, float) and isinstance(b, float) and opcode != "MOD":
            if opcode == "ADD":
                return a + b
            if opcode == "SUB":
                return a - b
            if opcode == "MUL":
                return a * b
            if b == 0.0:
                self.fault(FaultKind.DIVISION_BY_ZERO, "Cannot divide by zero")
            return a / b

        kinds = "integer" if opcode == "MOD" else "numeric"
        self.fault(
            FaultKind.TYPE_MISMATCH,
            f"Cannot {context} non-{kinds} values {debug_repr(a)} and {debug_repr(b)}",
        )

    def step(self) -> bool:
        instruction = self.instructions[self.ip]
        opcode, arg = instruction.opcode, instruction.arg

        if self.debug:
            self.trace(instruction)

        if opcode == "PUSH":
            self.stack.append(arg)
            self.ip += 1
            return False

        if opcode in ("ADD", "SUB", "MUL", "DIV", "MOD"):
            self.stack.append(self.arith(opcode))
            self.ip += 1
            return False

        if opcode in ("EQ", "NE"):
            a, b = self.pop_two("compare")
            equal = values_equal(a, b)
            self.stack.append(equal if opcode == "EQ" else not equal)
            self.ip += 1
            return False

        if opcode in ("AND", "OR"):
            a, b = self.pop_two("compare")
            a = self.require_bool(a, opcode.lower())
            b = self.require_bool(b, opcode.lower())
            self.stack.append((a and b) if opcode == "AND" else (a or b))
            self.ip += 1
            return False

        if opcode == "NOT":
            a = self.require_bool(self.pop("negate"), "negate")
            self.stack.append(not a)
            self.ip += 1
            return False

        if opcode == "DUP":
            self.stack.append(self.peek("duplicate"))
            self.ip += 1
            return False

        if opcode == "SWAP":
            a, b = self.pop_two("swap")
            self.stack.append(a)
            self.stack.append(b)
            self.ip += 1
            return False

        if opcode == "OVER":
            if len(self.stack) < 2:
                self.fault(FaultKind.STACK_UNDERFLOW, "Not enough values on the stack to duplicate")
            self.stack.append(self.stack[-2])
            self.ip += 1
            return False

        if opcode == "ROT":
            a, b = self.pop_two("rotate")
            c = self.pop("rotate")
            self.stack.append(b)
            self.stack.append(a)
            self.stack.append(c)
            self.ip += 1
            return False

        if opcode == "DROP":
            # empty stack is fine here, unlike every other consumer
            if self.stack:
                self.stack.pop()
            self.ip += 1
            return False

        if opcode == "PRINT":
            self.out.write(format_value(self.peek("print")))
            self.out.flush()
            self.ip += 1
            return False

        if opcode == "EXIT":
            return True

        if opcode == "JUMP":
            self.splice(arg)
            return False

        if opcode == "IFJMP":
            top = self.peek("compare")
            if isinstance(top, bool):
                taken = top
            elif is_int(top):
                taken = top == 0
            else:
                self.fault(FaultKind.TYPE_MISMATCH, f"Cannot branch on value {debug_repr(top)}")
            if taken:
                self.splice(arg)
            else:
                self.ip += 1
            return False

        raise Exception(f"Unknown opcode: {opcode}")

    def run(self):
        """Execute main to completion; returns the final stack."""
        self.load_main()
        steps = 0
        while self.ip < len(self.instructions):
            if self.max_steps is not None:
                steps += 1
                if steps > self.max_steps:
                    self.fault(FaultKind.STEP_LIMIT_EXCEEDED, "Step limit exceeded (possible infinite loop)")

            halted = self.step()
            if halted:
                break
        return self.stack

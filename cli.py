import sys
import traceback

from errors import StackVMError
from parser import parse_program
from values import debug_repr
from vm import VM


USAGE = """Usage:
  stackvm run <file> [-d|--debug] [--max-steps N]
  stackvm sections <file>
  (optional) --traceback to show Python traceback"""


def usage_error(message=None):
    if message:
        print(message, file=sys.stderr)
    print(USAGE, file=sys.stderr)
    sys.exit(1)


def read_source(path):
    try:
        # newline="" keeps a lone \r inside its line; the lexer handles \r\n
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        sys.exit(1)


def report(e, show_traceback):
    if show_traceback:
        traceback.print_exc()
    else:
        print(str(e), file=sys.stderr)
    sys.exit(1)


def format_instruction(ins):
    if ins.opcode == "PUSH":
        return f"PUSH {debug_repr(ins.arg)}"
    if ins.arg is not None:
        return f"{ins.opcode} {ins.arg}"
    return ins.opcode


def cmd_sections(path, show_traceback=False):
    code = read_source(path)
    try:
        program = parse_program(code)
    except StackVMError as e:
        report(e, show_traceback)

    for section in program:
        print(f"::{section.name}:  ({len(section)} instructions)")
        for i, ins in enumerate(section.instructions):
            print(f"  {i:04d}  {format_instruction(ins):<24} ; line {ins.line}")
    print(f"; sections: {', '.join(program.section_names())}")


def cmd_run(path, debug=False, max_steps=None, show_traceback=False):
    code = read_source(path)
    try:
        program = parse_program(code)
        vm = VM(program, debug=debug, color=debug and sys.stdout.isatty())
        vm.max_steps = max_steps
        vm.run()
    except StackVMError as e:
        sys.stdout.flush()
        report(e, show_traceback)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    show_traceback = False
    if "--traceback" in args:
        show_traceback = True
        args.remove("--traceback")

    if not args:
        usage_error()

    cmd = args[0]
    rest = args[1:]

    if cmd == "sections":
        if len(rest) != 1:
            usage_error("sections takes exactly one file.")
        cmd_sections(rest[0], show_traceback=show_traceback)
        return

    if cmd != "run":
        usage_error(f"Unknown command: {cmd}")

    debug = False
    max_steps = None
    paths = []
    i = 0
    while i < len(rest):
        arg = rest[i]
        if arg in ("-d", "--debug"):
            debug = True
        elif arg == "--max-steps":
            if i + 1 >= len(rest):
                usage_error("--max-steps requires a number.")
            try:
                max_steps = int(rest[i + 1])
            except ValueError:
                usage_error(f"Invalid --max-steps value: {rest[i + 1]}")
            if max_steps < 0:
                usage_error(f"Invalid --max-steps value: {rest[i + 1]}")
            i += 1
        elif arg.startswith("-"):
            usage_error(f"Unknown option: {arg}")
        else:
            paths.append(arg)
        i += 1

    if len(paths) != 1:
        usage_error("run takes exactly one file.")

    cmd_run(paths[0], debug=debug, max_steps=max_steps, show_traceback=show_traceback)


if __name__ == "__main__":
    main()

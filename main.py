import logging
import sys

from interpreter import MAX_STEPS, trace_program
from programs import SampleProgram, get_program, program_names
from trace_table import export_csv, format_trace_text

USAGE = ("Usage: python main.py <file.pse> [--trace] [--csv out.csv] [--max-steps N] [--gui] [--verbose]\n"
         "       python main.py --sample \"Linear Search\" [...]\n"
         "       python main.py --list")


def load_program(filename):
    """Read a program file; returns None (after reporting) when unreadable."""
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return SampleProgram(filename, tuple(f.read().split('\n')))
    except OSError as e:
        print(f"Error: cannot read {filename}: {e}")
        return None


def run(lines, show_trace=False, csv_path=None, max_steps=MAX_STEPS):
    trace = trace_program(lines, max_steps)

    for line in trace.final_output:
        print(line)
    if trace.halted_by_step_limit:
        print(f"(stopped after {max_steps} steps)")

    if show_trace:
        print("\n" + "=" * 60)
        print("TRACE TABLE")
        print("=" * 60)
        print(format_trace_text(trace))
    if csv_path:
        try:
            export_csv(trace, csv_path)
        except OSError as e:
            print(f"Error: cannot write {csv_path}: {e}")
        else:
            print(f"Trace exported to {csv_path}")
    return trace


def main(argv):
    filename = None
    sample = None
    show_trace = False
    csv_path = None
    max_steps = MAX_STEPS
    gui = False

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == '--trace':
            show_trace = True
        elif arg == '--gui':
            gui = True
        elif arg == '--verbose':
            logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        elif arg == '--list':
            print("\n".join(program_names()))
            return 0
        elif arg in ('--csv', '--sample', '--max-steps') and i + 1 < len(argv):
            i += 1
            if arg == '--csv':
                csv_path = argv[i]
            elif arg == '--sample':
                sample = argv[i]
            else:
                try:
                    max_steps = int(argv[i])
                except ValueError:
                    max_steps = 0
                if max_steps < 1:
                    print(f"Error: --max-steps expects a positive number, got {argv[i]!r}")
                    return 2
        elif arg.startswith('--'):
            print(USAGE)
            return 2
        else:
            filename = argv[i]
        i += 1

    program = None
    if sample is not None:
        try:
            program = get_program(sample)
        except KeyError as e:
            print(f"Error: {e.args[0]}. Try --list.")
            return 2
    elif filename is not None:
        program = load_program(filename)
        if program is None:
            return 1

    if gui:
        # Imported here so the command line works without a display
        from trace_viewer import run_viewer
        run_viewer(program, max_steps)
        return 0

    if program is None:
        print(USAGE)
        return 2
    run(program.code, show_trace, csv_path, max_steps)
    return 0


def cli():
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()

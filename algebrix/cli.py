#!/usr/bin/env python3
"""
algebrix Command-Line Interface

Provides interactive REPL, script execution, and pipe/filter modes.

Usage:
    algebrix                              # Start REPL
    algebrix script.alg                   # Run script
    algebrix -e "x + x"                   # Simplify one expression
    algebrix -e "x^x" --eval x=3          # Simplify, then evaluate
    echo "2*x/2" | algebrix --latex       # Filter mode

Script Format (.alg files):
    #!/usr/bin/env algebrix
    :trace on
    :constants physics.py

    x + x
    (x^2)/x

REPL Commands:
    :help                 Show help
    :trace on|off         Toggle rewrite tracing
    :latex on|off         Toggle LaTeX output
    :bounds               Show variable bounds of the last expression
    :eval NAME=VALUE ...  Evaluate the last expression
    :constants [NAME]     Show or load the named-constant table
    :quit                 Exit
"""

import argparse
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Dict, Optional

from . import __version__
from .constants import DEFAULT_CONSTANTS, ConstantTable
from .expression import Expression
from .function import Function
from .number import format_decimal

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False

# Standard constant-table search paths
CONSTANTS_SEARCH_PATHS = [
    Path("./constants"),
    Path.home() / ".config" / "algebrix" / "constants",
]


def load_custom_constants(name_or_path: str) -> Optional[ConstantTable]:
    """
    Load a constant table from a Python file.

    The file should define a CONSTANTS dict mapping names to numbers
    (ints, strings or Decimals).

    Args:
        name_or_path: Either a path to a .py file, or a name to search for

    Returns:
        DEFAULT_CONSTANTS extended with the file's CONSTANTS, or None if not found
    """
    path = Path(name_or_path)

    if path.suffix == ".py" or "/" in name_or_path or "\\" in name_or_path:
        if not path.exists():
            return None
        search_paths = [path]
    else:
        search_paths = [search_dir / f"{name_or_path}.py"
                        for search_dir in CONSTANTS_SEARCH_PATHS]

    for constants_path in search_paths:
        if constants_path.exists():
            try:
                spec = importlib.util.spec_from_file_location("custom_constants", constants_path)
                if spec and spec.loader:
                    module = importlib.util.module_from_spec(spec)
                    spec.loader.exec_module(module)
                    if hasattr(module, "CONSTANTS"):
                        return DEFAULT_CONSTANTS.extend(module.CONSTANTS)
            except Exception as e:
                print(f"Error loading constants from {constants_path}: {e}", file=sys.stderr)

    return None


def parse_assignments(text: str) -> Dict[str, str]:
    """Parse "x=2 y=3" (or "x=2, y=3") into {"x": "2", "y": "3"}."""
    values: Dict[str, str] = {}
    for item in text.replace(",", " ").split():
        name, sep, value = item.partition("=")
        if not sep or not name or not value:
            raise ValueError(f"Expected NAME=VALUE, got {item!r}")
        values[name.strip()] = value.strip()
    return values


class AlgebraCompleter:
    """Tab completer for the algebrix REPL."""

    COMMANDS = [
        ":help", ":quit", ":exit", ":q",
        ":trace", ":latex", ":bounds", ":eval", ":constants",
    ]

    TOGGLE_OPTIONS = ["on", "off"]

    def __init__(self, repl: 'AlgebraREPL'):
        self.repl = repl

    def complete(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            line = readline.get_line_buffer() if HAS_READLINE else ""
            self.matches = self._get_matches(text, line)

        try:
            return self.matches[state]
        except IndexError:
            return None

    def _get_matches(self, text: str, line: str) -> list:
        line = line.lstrip()

        if line.startswith(":trace ") or line.startswith(":latex "):
            return [t for t in self.TOGGLE_OPTIONS if t.startswith(text)]

        if line.startswith(":constants "):
            return self._complete_path(text)

        if line.startswith(":eval "):
            names = self.repl.last.variables() if self.repl.last is not None else []
            return [f"{n}=" for n in names if n.startswith(text)]

        if text.startswith(":") or (line.startswith(":") and " " not in line):
            return [c for c in self.COMMANDS if c.startswith(text)]

        return []

    def _complete_path(self, text: str) -> list:
        import glob

        if not text:
            text = "./"

        matches = []
        for path in glob.glob(text + "*"):
            if Path(path).is_dir():
                matches.append(path + "/")
            else:
                matches.append(path)
        return matches


def count_parens(text: str) -> int:
    """Count unbalanced parentheses. Returns >0 if more open than close."""
    return text.count("(") - text.count(")")


class AlgebraREPL:
    """Interactive REPL for algebrix."""

    def __init__(self):
        self.trace = False
        self.latex = False
        self.constants: ConstantTable = DEFAULT_CONSTANTS
        self.eval_values: Dict[str, str] = {}
        self.last: Optional[Expression] = None
        self.running = True
        self.multi_line_buffer = ""

        # Set up readline history and completion
        if HAS_READLINE:
            self.history_file = Path.home() / ".algebrix_history"
            try:
                readline.read_history_file(self.history_file)
            except (FileNotFoundError, OSError):
                pass
            readline.set_history_length(1000)

            self.completer = AlgebraCompleter(self)
            readline.set_completer(self.completer.complete)
            readline.parse_and_bind("tab: complete")
            readline.set_completer_delims(" \t\n")

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE:
            try:
                readline.write_history_file(self.history_file)
            except OSError:
                pass

    def set_constants(self, name: str) -> bool:
        """Load a constant table by name or path."""
        if name.lower() == "default":
            self.constants = DEFAULT_CONSTANTS
            return True
        table = load_custom_constants(name)
        if table is None:
            return False
        self.constants = table
        return True

    def _toggle(self, current: bool, arg: str) -> bool:
        if arg.lower() in ("on", "true", "1"):
            return True
        if arg.lower() in ("off", "false", "0"):
            return False
        return not current

    def evaluate_last(self, values: Dict[str, str]) -> str:
        """Evaluate the last expression exactly at the given values."""
        if self.last is None:
            return "No expression to evaluate"
        value = Function(self.last, constants=self.constants)(**values)
        return format_decimal(value)

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd == "quit" or cmd == "exit" or cmd == "q":
            self.running = False
            return None

        elif cmd == "trace":
            self.trace = self._toggle(self.trace, arg)
            return f"Tracing {'enabled' if self.trace else 'disabled'}"

        elif cmd == "latex":
            self.latex = self._toggle(self.latex, arg)
            return f"LaTeX output {'enabled' if self.latex else 'disabled'}"

        elif cmd == "bounds":
            if self.last is None or not len(self.last.bounds):
                return "No bounds"
            return str(self.last.bounds)

        elif cmd == "eval":
            if not arg:
                return "Usage: :eval NAME=VALUE ..."
            try:
                return self.evaluate_last(parse_assignments(arg))
            except Exception as e:
                return f"Error: {e}"

        elif cmd == "constants":
            if not arg:
                return "\n".join(f"{name} = {format_decimal(value)}"
                                 for name, value in self.constants.items())
            if self.set_constants(arg):
                return f"Constants loaded: {len(self.constants)} names"
            return f"Unknown constants: {arg}"

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return """algebrix REPL Commands:
  :help                 Show this help
  :trace on|off         Toggle rewrite tracing
  :latex on|off         Toggle LaTeX output
  :bounds               Show variable bounds of the last expression
  :eval NAME=VALUE ...  Evaluate the last expression exactly
  :constants [NAME]     Show constants, or load NAME / path.py / default
  :quit                 Exit

Syntax:
  numbers, variables, + - * / ^ and parentheses
  x + x          =>  2*x
  (x^2)/x        =>  x
"""

    def render(self, expr: Expression) -> str:
        return expr.to_latex() if self.latex else expr.to_text()

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        Returns the result to print, or None.
        """
        line = line.strip()

        if not line or line.startswith("#"):
            return None

        if line.startswith(":"):
            return self.handle_command(line)

        try:
            expr = Expression.parse(line)
            if self.trace:
                expr, trace = expr.simplify(trace=True)
                output = self.render(expr)
                if trace.steps:
                    output = f"{output}\n{trace.format('rules')}"
            else:
                output = self.render(expr.simplify())
            self.last = expr

            if self.eval_values:
                output = f"{output}\n= {self.evaluate_last(self.eval_values)}"
            return output

        except Exception as e:
            return f"Error: {e}"

    def run(self):
        """Run the REPL loop."""
        print(f"algebrix {__version__} - symbolic simplification")
        print("Type :help for help, :quit to exit")
        print()

        while self.running:
            try:
                prompt = "...... " if self.multi_line_buffer else "alg> "
                line = input(prompt)

                if self.multi_line_buffer:
                    self.multi_line_buffer += " " + line
                else:
                    self.multi_line_buffer = line

                paren_count = count_parens(self.multi_line_buffer)
                if paren_count > 0:
                    continue

                complete_input = self.multi_line_buffer
                self.multi_line_buffer = ""

                result = self.process_line(complete_input)
                if result:
                    print(result)

            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                if self.multi_line_buffer:
                    print("\nInput cancelled")
                    self.multi_line_buffer = ""
                else:
                    print()
                continue

        self.save_history()


class ScriptRunner:
    """Runs algebrix scripts, one-shot expressions and stdin filters."""

    def __init__(self):
        self.repl = AlgebraREPL()

    def run_script(self, path: Path) -> int:
        """
        Run a script file.

        Returns:
            Exit code (0 for success)
        """
        try:
            lines = path.read_text().splitlines()
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1

        for lineno, line in enumerate(lines, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            result = self.repl.process_line(line)
            if line.startswith(":"):
                # command confirmations are silent in scripts; failures are fatal
                if result and (result.startswith("Error") or result.startswith("Unknown")):
                    print(f"{path}:{lineno}: {result}", file=sys.stderr)
                    return 1
                continue

            if result and result.startswith("Error"):
                print(f"{path}:{lineno}: {result}", file=sys.stderr)
                return 1
            if result:
                print(result)

        return 0

    def run_expression(self, expr_str: str) -> int:
        """
        Simplify a single expression.

        Returns:
            Exit code (0 for success)
        """
        result = self.repl.process_line(expr_str)
        if result:
            print(result)
            if result.startswith("Error"):
                return 1
        return 0

    def run_stdin(self) -> int:
        """
        Read expressions from stdin and simplify them.

        Returns:
            Exit code (0 for success)
        """
        for line in sys.stdin:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            result = self.repl.process_line(line)
            if result:
                print(result)
                if result.startswith("Error"):
                    return 1

        return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="algebrix",
        description="algebrix - symbolic simplification of algebraic expressions",
        epilog="Examples:\n"
               "  algebrix                         Start REPL\n"
               "  algebrix script.alg              Run script\n"
               "  algebrix -e 'x + x'              Simplify expression\n"
               "  algebrix -e 'x^x' --eval x=3     Simplify and evaluate\n"
               "  echo '2*x/2' | algebrix --latex  Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="Script file to run (.alg)"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Simplify a single expression"
    )

    parser.add_argument(
        "-t", "--trace",
        action="store_true",
        help="Show the rewrite rules applied"
    )

    parser.add_argument(
        "-l", "--latex",
        action="store_true",
        help="Print results as LaTeX"
    )

    parser.add_argument(
        "--eval",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Evaluate each result with these values (can be repeated)"
    )

    parser.add_argument(
        "-c", "--constants",
        help="Constant table to use (name or path.py defining CONSTANTS)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every rewrite to stderr"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    runner = ScriptRunner()
    runner.repl.trace = args.trace
    runner.repl.latex = args.latex

    if args.constants and not runner.repl.set_constants(args.constants):
        print(f"Unknown constants: {args.constants}", file=sys.stderr)
        sys.exit(1)

    try:
        for item in args.eval:
            runner.repl.eval_values.update(parse_assignments(item))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.script:
        sys.exit(runner.run_script(Path(args.script)))

    elif args.expr:
        sys.exit(runner.run_expression(args.expr))

    elif not sys.stdin.isatty():
        sys.exit(runner.run_stdin())

    else:
        runner.repl.run()


if __name__ == "__main__":
    main()

"""Command line entry point for evaluating formulas."""

import argparse
import logging
from logging.handlers import RotatingFileHandler
import sys
from typing import Dict, List

from formula.formula import Formula
from formula.formula_context import FormulaDictContext
from formula.formula_error import FormulaError
from formula.formula_math import FormulaMathFunctions
from formula.formula_reader import read_source
from formula.formula_value import FormulaValue, FormulaNumber, FormulaString, FormulaBoolean


def setup_logging(level: str, log_file: str | None) -> None:
    """Configure logging to stderr, or to a rotating log file if one is given."""
    handler: logging.Handler
    if log_file:
        # Keep up to 5 old files, max 1MB each
        handler = RotatingFileHandler(
            log_file,
            maxBytes=1024*1024,
            backupCount=5,
            encoding='utf-8'
        )

    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[handler],
        force=True
    )


def parse_variable(binding: str) -> tuple[str, FormulaValue]:
    """
    Parse a NAME=VALUE binding from the command line.

    Values that read as numbers become numbers, 'true' and 'false' become
    booleans and anything else is kept as a string.

    Raises:
        argparse.ArgumentTypeError: If the binding has no '='
    """
    name, sep, text = binding.partition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {binding!r}")

    if text in ('true', 'false'):
        return name, FormulaBoolean(text == 'true')

    try:
        return name, FormulaNumber(FormulaMathFunctions().parse_number(text))

    except ValueError:
        return name, FormulaString(text)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='formula',
        description='Evaluate a formula expression'
    )
    parser.add_argument(
        'expression',
        nargs='?',
        help="expression to evaluate (default: read stdin); put '--' before an expression starting with '-'"
    )
    parser.add_argument('-f', '--file', help='read the expression from a file')

    output = parser.add_mutually_exclusive_group()
    output.add_argument('--tokens', action='store_true', help='print the tokens instead of evaluating')
    output.add_argument('--ast', action='store_true', help='print the syntax tree instead of evaluating')

    parser.add_argument(
        '--var',
        action='append',
        default=[],
        type=parse_variable,
        metavar='NAME=VALUE',
        help='bind an identifier (may be repeated)'
    )
    parser.add_argument(
        '--max-parse-depth',
        type=int,
        default=32,
        help='maximum nesting of parentheses, calls and prefix operators (default: %(default)s)'
    )
    parser.add_argument(
        '--max-eval-depth',
        type=int,
        default=200,
        help='maximum syntax tree depth during evaluation (default: %(default)s)'
    )
    parser.add_argument(
        '--log-level',
        default='warning',
        choices=['debug', 'info', 'warning', 'error', 'critical'],
        help='logging level'
    )
    parser.add_argument('--log-file', help='write logs to a rotating log file instead of stderr')
    return parser


def read_expression(args: argparse.Namespace) -> str:
    """Get the expression from the arguments, a file, or standard input."""
    if args.expression is not None:
        return args.expression

    if args.file:
        with open(args.file, 'rb') as f:
            return read_source(f)

    return read_source(sys.stdin.buffer)


def main(argv: List[str] | None = None) -> int:
    """Main function to run the formula command line."""
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    logger = logging.getLogger("FormulaCLI")

    formula = Formula(max_parse_depth=args.max_parse_depth, max_eval_depth=args.max_eval_depth)
    variables: Dict[str, FormulaValue] = dict(args.var)

    try:
        expression = read_expression(args)
        if args.tokens:
            for token in formula.tokenize(expression):
                print(f"{token.line}:{token.column}\t{token.type.name}\t{token.value}")

            return 0

        if args.ast:
            print(formula.parse(expression).describe())
            return 0

        print(formula.evaluate_and_format(expression, FormulaDictContext(variables)))
        return 0

    except FormulaError as e:
        logger.debug("formula failed: %s", e.message)
        print(f"error: {e}", file=sys.stderr)
        return 1

    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

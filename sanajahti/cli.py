"""
Command-line front end for the Sanajahti solver.

Usage:
    sanajahti solve [GRID] [--wordlist PATH] [--min-length N] [--paths]
    sanajahti serve [--host HOST] [--port PORT]

Examples:
    sanajahti solve CATSREPOBONEDIGS --wordlist wordlist_fin.txt
    sanajahti solve "C A T S, R E P O, B O N E, D I G S" --max-results 20
    sanajahti solve < grid.txt          # reads GRID_SIZE lines from stdin
    sanajahti serve --port 8080
"""
import argparse
import logging
import sys

from sanajahti.settings import settings

logger = logging.getLogger("sanajahti")


def _read_grid_lines(size: int, stream) -> str:
    print(f"Input the grid on {size} lines")
    lines = []
    for _ in range(size):
        line = stream.readline()
        if not line:
            break
        lines.append(line.strip())
    return "".join(lines)


def _format_path(path) -> str:
    return " ".join(f"({r},{c})" for r, c in path)


def cmd_solve(args) -> int:
    from sanajahti.metrics import StageTimer
    from sanajahti.solver import Grid, InvalidGrid, SolveTimeout, find_words, rank_words
    from sanajahti.wordlist import load_index

    raw = args.grid if args.grid is not None else _read_grid_lines(args.size, sys.stdin)
    try:
        grid = Grid.parse(raw, args.size, normalize=True)
    except InvalidGrid as e:
        print(f"Error: invalid grid: {e}", file=sys.stderr)
        return 1

    timer = StageTimer("cli")
    with timer.stage("load"):
        try:
            index = load_index(args.wordlist, args.min_length)
        except FileNotFoundError:
            print(f"Error: wordlist {args.wordlist} does not exist", file=sys.stderr)
            return 1

    with timer.stage("solve"):
        try:
            paths = find_words(grid, index, workers=args.workers, timeout=args.timeout or None)
        except SolveTimeout as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    words = rank_words(paths, args.max_results, longest_first=False)
    logger.info("Solved %s: %d words, timings=%s", grid, len(paths), timer.summary())

    print("Found the following words")
    for word in words:
        if args.paths:
            print(f"{word}\t{_format_path(paths[word])}")
        else:
            print(word)
    return 0


def cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run("sanajahti.server:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sanajahti", description="Sanajahti / Wordz grid solver")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    p_solve = sub.add_parser("solve", help="Solve one grid")
    p_solve.add_argument("grid", nargs="?", default=None,
                         help="Grid letters in row-major order (read from stdin if omitted)")
    p_solve.add_argument("--wordlist", default=str(settings.WORDLIST_PATH),
                         help=f"Newline-delimited wordlist (default: {settings.WORDLIST_PATH})")
    p_solve.add_argument("--min-length", type=int, default=settings.MIN_WORD_LENGTH,
                         help=f"Shortest word to report (default: {settings.MIN_WORD_LENGTH})")
    p_solve.add_argument("--size", type=int, default=settings.GRID_SIZE,
                         help=f"Grid side length (default: {settings.GRID_SIZE})")
    p_solve.add_argument("--max-results", type=int, default=0,
                         help="Print at most this many words (default: all)")
    p_solve.add_argument("--workers", type=int, default=settings.SEARCH_WORKERS,
                         help="Search start cells on this many threads (0 = sequential)")
    p_solve.add_argument("--timeout", type=float, default=settings.SOLVE_TIMEOUT,
                         help="Give up after this many seconds (0 = no limit)")
    p_solve.add_argument("--paths", action="store_true",
                         help="Print the (row,col) path of each word")
    p_solve.set_defaults(func=cmd_solve)

    p_serve = sub.add_parser("serve", help="Run the HTTP service")
    p_serve.add_argument("--host", default=settings.HOST)
    p_serve.add_argument("--port", type=int, default=settings.PORT)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose or settings.DEBUG else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

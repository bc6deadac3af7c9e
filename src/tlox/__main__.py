import sys

from tlox.lox import Lox


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]

    if len(argv) > 1:
        print("Usage: tlox [script]")
        sys.exit(64)

    lox = Lox()

    if len(argv) == 1:
        try:
            lox.run_file(argv[0])
        except OSError as error:
            print(f"Could not read '{argv[0]}': {error.strerror}", file=sys.stderr)
            sys.exit(66)

        if lox.had_error:
            sys.exit(65)
        if lox.had_runtime_error:
            sys.exit(70)
    else:
        lox.run_prompt()


if __name__ == "__main__":
    main()

"""Main CLI entry point for cargo-erlangapp."""

import sys

from erlangapp_tooling.cli import build as build_cli


def usage() -> None:
    print("Usage:", file=sys.stderr)
    print("  cargo-erlangapp build [cargo rustc args]", file=sys.stderr)
    print("  cargo-erlangapp clean [cargo clean args]", file=sys.stderr)
    print("  cargo-erlangapp test [cargo test args]", file=sys.stderr)
    print(
        "Options: --app-root PATH (default: cwd), --platform linux|macos|windows|freebsd, "
        "--log-level LEVEL",
        file=sys.stderr,
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    if argv is None:
        argv = sys.argv[1:]
    # `cargo erlangapp build` runs us as `cargo-erlangapp erlangapp build`
    if argv and argv[0] == "erlangapp":
        argv = argv[1:]
    if not argv:
        usage()
        sys.exit(1)

    command, rest = argv[0], argv[1:]
    if command == "build":
        build_cli.run_build_argv(rest)
    elif command == "clean":
        build_cli.run_clean_argv(rest)
    elif command == "test":
        build_cli.run_test_argv(rest)
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        usage()
        sys.exit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

from service_builder.interface.cli import cli


def main() -> None:
    """Console entry point."""
    cli()


if __name__ == "__main__":
    main()

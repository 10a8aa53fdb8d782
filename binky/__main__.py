"""Module entrypoint for ``python -m binky``.

All argument parsing and registry setup happen in ``binky.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()

"""Script de ejecución.

Permite ejecutar la CLI con `python -m checkpoint` además del script
`checkpoint` instalado por el paquete.
"""

from __future__ import annotations

from checkpoint.cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()

"""Script de ejecución dentro de `src/`.

Mantiene un entrypoint simple además del script `brainrot` del paquete.
"""

from __future__ import annotations

import sys

# Los emojis de las cartas rompen consolas cp1252 en Windows.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()

# placement/__main__.py
from __future__ import annotations

import argparse
import sys


def _run_exemple(graine: int) -> int:
    # import tardif : l'aide s'affiche sans charger le cœur
    try:
        from .exemples import run_exemple
    except ImportError as e:
        print("Impossible d'importer placement.exemples.run_exemple :", e, file=sys.stderr)
        return 1
    run_exemple(graine)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="placement",
        description="Outils et exemples pour le placement des élèves."
    )
    sub = parser.add_subparsers(dest="cmd")

    p_ex = sub.add_parser("exemple", help="Exécute le scénario d'exemple.")
    p_ex.add_argument("--graine", type=int, default=42, help="Graine du hasard (défaut : 42).")
    p_ex.set_defaults(func=lambda a: _run_exemple(a.graine))

    # sans sous-commande, on lance l'exemple
    args = parser.parse_args(argv)
    if not args.cmd:
        return _run_exemple(42)

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""
╔══════════════════════════════════════════════════════════════════╗
║        Steppable Red-Black Tree v1.0 — Entry Point                ║
║                                                                  ║
║  Author  : Arshanhp                                              ║
║  License : MIT                                                   ║
║  Run     : python main.py [values...] [--debug]                  ║
║                                                                  ║
║  Description:                                                    ║
║    Configures logging, loads the persisted Settings and opens    ║
║    the viewer.  Numbers given on the command line are inserted   ║
║    (each fix-up run to completion) before the window appears.    ║
║                                                                  ║
║  Architecture:                                                   ║
║    main.py ──► viewer.open_viewer ──► TreeViewWindow             ║
║                                          └──► stepper.TreeStepper║
╚══════════════════════════════════════════════════════════════════╝
"""

import sys, logging, argparse

from rbtree import parse_value
from settings import Settings


def _key(text):
    """argparse type: a finite number usable as a tree key."""
    value = parse_value(text)
    if value is None:
        raise argparse.ArgumentTypeError(f"not a finite number: {text!r}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        description="Red-black tree with step-by-step CLRS fix-ups",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py                   # empty tree
    python main.py 10 20 30 40       # seed four keys, then open the viewer
    python main.py 5 2.5 --debug     # log every fix-up case
        """
    )
    parser.add_argument(
        'values',
        nargs='*',
        type=_key,
        help='Keys inserted (each fix-up run to completion) before the window opens'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Log at DEBUG level'
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    # Tk is only needed once the window opens
    from viewer import open_viewer
    open_viewer(settings=Settings(), values=args.values)
    return 0


if __name__ == "__main__":
    sys.exit(main())

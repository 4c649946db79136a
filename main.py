"""Life Morale Index: CLI entry point."""

import logging
import sys

from morale import generate_report, score

if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    path = sys.argv[1] if len(sys.argv) > 1 else "sample_input.json"
    result = score(path)
    print(generate_report(result))

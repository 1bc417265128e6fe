# SPDX-License-Identifier: MIT

from wordsprint.cleanup import register_cleanup
from wordsprint.initialize import initialize
from wordsprint.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()

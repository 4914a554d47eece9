"""Package entry point for ``python -m x2t_bridge``.

Delegates to the CLI's main(); see x2t_bridge.cli for the subcommands.
"""

from x2t_bridge.cli import main

if __name__ == "__main__":
    main()

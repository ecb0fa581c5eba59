"""Package entry point for ``python -m fcpx_captions``."""

from fcpx_captions.cli import main

if __name__ == "__main__":
    main()

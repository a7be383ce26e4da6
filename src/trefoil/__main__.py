"""Command-line interface."""
from trefoil.main import main

if __name__ == "__main__":
    main()

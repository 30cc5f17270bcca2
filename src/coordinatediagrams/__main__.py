"""Command-line interface."""
from coordinatediagrams.main import main

if __name__ == "__main__":
    main()

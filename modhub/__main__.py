"""Allow running the bus host as a module: python -m modhub."""

from modhub.runner import main

if __name__ == "__main__":
    main()

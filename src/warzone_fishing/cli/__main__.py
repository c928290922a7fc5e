"""Allow running the admin tool directly with: python -m warzone_fishing.cli"""

from warzone_fishing.cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())

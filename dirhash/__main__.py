# dirhash/__main__.py
from dirhash.cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())

# railcut/__main__.py
# Package entrypoint so you can run:
#   python -m railcut --help
# and it will delegate to the JSON runner by default.
#
# Examples:
#   python -m railcut --job job.json
#   python -m railcut --job job.json --mode scenarios --priority joints --out out/

from __future__ import annotations

from .run_json import main

if __name__ == "__main__":
    main()

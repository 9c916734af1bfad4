"""Allow ``python -m returnlint``."""

from returnlint.main import main

raise SystemExit(main())

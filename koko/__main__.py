"""Module entrypoint: ``python -m koko``."""

from koko.runtime.entrypoint import main

raise SystemExit(main())

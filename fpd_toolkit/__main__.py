from fpd_toolkit.cli import main

raise SystemExit(main())

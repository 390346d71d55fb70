from site_forge.cli import main

raise SystemExit(main())

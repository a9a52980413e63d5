from bytehuff.cli import main

raise SystemExit(main())

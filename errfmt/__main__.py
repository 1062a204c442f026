from errfmt.compiler.cli import main

raise SystemExit(main())

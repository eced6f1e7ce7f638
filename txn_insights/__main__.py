from txn_insights.cli import main

raise SystemExit(main())

from healthprobe.main import main

raise SystemExit(main())

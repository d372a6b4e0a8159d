from .receiver import main

raise SystemExit(main())

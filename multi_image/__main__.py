from multi_image.cli import main

raise SystemExit(main())

from segment_rag.cli import main

raise SystemExit(main())

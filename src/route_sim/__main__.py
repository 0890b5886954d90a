import sys

from route_sim.main import main

sys.exit(main())

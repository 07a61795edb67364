import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))
from blocksizes.report import main

if __name__ == "__main__":
    sys.exit(main())

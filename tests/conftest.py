"""Configuration for pytest."""

import os
import sys

# Make the rfc3492 package importable without installing it
test_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(test_dir)

if project_root not in sys.path:
    sys.path.insert(0, project_root)

"""
Entry Point Script (Bootstrap)
==============================
Runs the simulator from a source checkout without installing it.

Why is this file needed?
------------------------
1. It is located outside the 'src' package to act as a convenient runner.
2. It modifies 'sys.path' so imports like 'from bucketflow.model...' resolve
   without a prior `pip install -e .`.

Usage:
    $ python run.py --duration 10 --log-level DEBUG
"""
import sys
import os

# Add the 'src' directory to the Python path
current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from bucketflow.main import main

if __name__ == "__main__":
    sys.exit(main())

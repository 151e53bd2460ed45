#!/usr/bin/env python3
"""hcard-mapper — lookup proxy.  Run with:  python3 start.py"""
import sys
import os

script_dir = os.path.dirname(os.path.abspath(__file__))
src_dir    = os.path.join(script_dir, "src")

sys.path.insert(0, src_dir)
os.environ["PYTHONPATH"] = src_dir + os.pathsep + os.environ.get("PYTHONPATH", "")
os.chdir(script_dir)

from hcard_mapper.config import ensure_workspace
from hcard_mapper.server import main

_, settings = ensure_workspace()
main(settings)

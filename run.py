#!/usr/bin/env python3
"""
run.py - Main entry point for the biscuit packing solver

Usage:
    python run.py -w 10 -l 20 [--mode quick|standard|maximum] [--seed 42] single -n 17
    python run.py -w 10 -l 20 [--runs 100000] multi --start 1 --end 30
"""
import sys
import os

# Add package root to path
script_dir = os.path.dirname(os.path.abspath(__file__))
if script_dir not in sys.path:
    sys.path.insert(0, script_dir)

from biscuit_packing.cli import main


if __name__ == "__main__":
    sys.exit(main())
